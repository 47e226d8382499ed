"""Core module for the groupfit application."""

from .types import FirestoreDocument, PaginatedResponse, PaginationInfo

__all__ = ["FirestoreDocument", "PaginatedResponse", "PaginationInfo"]
