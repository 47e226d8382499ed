"""Core data types for the groupfit application."""

from typing import Any, Dict, List, TypedDict  # noqa: UP035


class _FirestoreDocumentBase(TypedDict):
    id: str
    createdAt: Any


class FirestoreDocument(_FirestoreDocumentBase, total=False):
    """Generic Firestore document structure."""

    updatedAt: Any


class PaginationInfo(TypedDict):
    """Pagination block returned alongside listings."""

    page: int
    limit: int
    total: int
    totalPages: int


class PaginatedResponse(TypedDict):
    """Generic listing response structure."""

    data: List[Dict[str, Any]]  # noqa: UP006
    pagination: PaginationInfo
