"""Service layer for exercise record operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from firebase_admin import firestore
from flask import current_app

from groupfit.badges.services import BadgeService
from groupfit.core.constants import GROUPS_COLLECTION, RECORDS_COLLECTION
from groupfit.errors import NotFoundError
from groupfit.participant.services import ParticipantService
from groupfit.utils import paginate, serialize_document, sort_key

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from groupfit.core.types import PaginatedResponse

    from .models import Record, RecordSubmission


class RecordService:
    """Service class for record-related operations."""

    @staticmethod
    def _ensure_group(db: Client, group_id: str) -> None:
        group_doc = cast(
            "DocumentSnapshot",
            db.collection(GROUPS_COLLECTION).document(group_id).get(),
        )
        if not group_doc.exists:
            raise NotFoundError("Group not found.", path="groupId")

    @staticmethod
    def create_record(
        db: Client, group_id: str, submission: RecordSubmission
    ) -> Record:
        """Log a record for an authenticated participant of the group."""
        RecordService._ensure_group(db, group_id)
        author = ParticipantService.authenticate(
            db, group_id, submission["authorNickname"], submission["authorPassword"]
        )
        author_nickname = (author.to_dict() or {}).get("nickname")

        record_ref = db.collection(RECORDS_COLLECTION).document()
        record_ref.set(
            {
                "groupId": group_id,
                "authorId": author.id,
                "author": {"id": author.id, "nickname": author_nickname},
                "exerciseType": submission["exerciseType"],
                "description": submission["description"],
                "time": submission["time"],
                "distance": submission["distance"],
                "photos": submission.get("photos") or [],
                "createdAt": firestore.SERVER_TIMESTAMP,
            }
        )
        current_app.logger.info(
            f"Record {record_ref.id} created by {author.id} in group {group_id}."
        )

        BadgeService.refresh_group_badges(db, group_id)

        record_doc = cast("DocumentSnapshot", record_ref.get())
        return cast("Record", serialize_document(record_doc))

    @staticmethod
    def list_records(
        db: Client,
        group_id: str,
        page: int,
        limit: int,
        order_by: str = "createdAt",
        order: str = "desc",
        search: str = "",
    ) -> PaginatedResponse:
        """List a group's records, optionally filtered by author nickname."""
        RecordService._ensure_group(db, group_id)

        needle = search.lower()
        query = db.collection(RECORDS_COLLECTION).where(
            filter=firestore.FieldFilter("groupId", "==", group_id)
        )
        record_docs = []
        for doc in query.stream():
            data = doc.to_dict() or {}
            nickname = str((data.get("author") or {}).get("nickname") or "")
            if needle and needle not in nickname.lower():
                continue
            record_docs.append(doc)

        key = sort_key(order_by)
        record_docs.sort(key=lambda doc: key(doc.to_dict() or {}), reverse=order == "desc")
        result = paginate(record_docs, page, limit)
        result["data"] = [serialize_document(doc) for doc in result["data"]]
        return result

    @staticmethod
    def get_record(db: Client, group_id: str, record_id: str) -> Record:
        """Fetch one record, which must belong to the given group."""
        record_doc = cast(
            "DocumentSnapshot",
            db.collection(RECORDS_COLLECTION).document(record_id).get(),
        )
        if not record_doc.exists or (record_doc.to_dict() or {}).get("groupId") != group_id:
            raise NotFoundError("Record not found.")
        return cast("Record", serialize_document(record_doc))
