"""Service layer for group operations and data orchestration."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore
from flask import current_app

from groupfit.badges.services import BadgeService
from groupfit.core.constants import (
    FIRESTORE_BATCH_LIMIT,
    GROUPS_COLLECTION,
    PARTICIPANTS_COLLECTION,
    RECORDS_COLLECTION,
)
from groupfit.errors import NotFoundError, UnauthorizedError
from groupfit.participant.services import ParticipantService
from groupfit.utils import paginate, serialize_document, sort_key

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from groupfit.core.types import PaginatedResponse
    from groupfit.group.models import Group


class GroupService:
    """Service class for group-related operations."""

    @staticmethod
    def get_group_doc(db: Client, group_id: str) -> DocumentSnapshot:
        """Fetch a group snapshot or raise NotFoundError."""
        group_doc = cast(
            "DocumentSnapshot",
            db.collection(GROUPS_COLLECTION).document(group_id).get(),
        )
        if not group_doc.exists:
            raise NotFoundError("Group not found.")
        return group_doc

    @staticmethod
    def _check_owner_password(db: Client, group_doc: DocumentSnapshot, password: str) -> None:
        owner_id = (group_doc.to_dict() or {}).get("ownerId")
        owner_doc = None
        if owner_id:
            owner_doc = cast(
                "DocumentSnapshot",
                db.collection(PARTICIPANTS_COLLECTION).document(owner_id).get(),
            )
        if (
            owner_doc is None
            or not owner_doc.exists
            or (owner_doc.to_dict() or {}).get("password") != password
        ):
            raise UnauthorizedError(
                "Group owner password does not match.", path="ownerPassword"
            )

    @staticmethod
    def create_group(db: Client, data: dict[str, Any]) -> dict[str, Any]:
        """Create a group and its owner participant.

        The group is written first without an owner, the owner participant is
        created against it, and only then is ``ownerId`` linked back.
        """
        group_ref = db.collection(GROUPS_COLLECTION).document()
        group_ref.set(
            {
                "name": data["name"],
                "description": data.get("description") or "",
                "photoUrl": data.get("photoUrl"),
                "goalRep": data["goalRep"],
                "tags": data.get("tags") or [],
                "discordWebhookUrl": data.get("discordWebhookUrl"),
                "discordInviteUrl": data.get("discordInviteUrl"),
                "likeCount": 0,
                "participantCount": 0,
                "badges": [],
                "ownerId": None,
                "createdAt": firestore.SERVER_TIMESTAMP,
                "updatedAt": firestore.SERVER_TIMESTAMP,
            }
        )

        owner_doc = ParticipantService.add_participant(
            db, group_ref.id, data["ownerNickname"], data["ownerPassword"]
        )
        group_ref.update({"ownerId": owner_doc.id})
        current_app.logger.info(
            f"Group {group_ref.id} created with owner {owner_doc.id}."
        )

        BadgeService.refresh_group_badges(db, group_ref.id)

        payload = serialize_document(cast("DocumentSnapshot", group_ref.get()))
        payload["owner"] = {
            "id": owner_doc.id,
            "nickname": data["ownerNickname"],
        }
        return payload

    @staticmethod
    def list_groups(
        db: Client,
        page: int,
        limit: int,
        order_by: str = "createdAt",
        order: str = "desc",
        search: str = "",
    ) -> PaginatedResponse:
        """List groups with name search, ordering and pagination."""
        needle = search.lower()
        group_docs = [
            doc
            for doc in db.collection(GROUPS_COLLECTION).stream()
            if not needle
            or needle in str((doc.to_dict() or {}).get("name", "")).lower()
        ]

        key = sort_key(order_by)
        group_docs.sort(key=lambda doc: key(doc.to_dict() or {}), reverse=order == "desc")
        result = paginate(group_docs, page, limit)
        result["data"] = [serialize_document(doc) for doc in result["data"]]
        return result

    @staticmethod
    def get_group_detail(db: Client, group_id: str) -> Group:
        """Fetch a group with its owner and participants."""
        group_doc = GroupService.get_group_doc(db, group_id)
        payload = serialize_document(group_doc)

        participant_docs = (
            db.collection(PARTICIPANTS_COLLECTION)
            .where(filter=firestore.FieldFilter("groupId", "==", group_id))
            .stream()
        )
        participants = [ParticipantService.to_public(doc) for doc in participant_docs]
        participants.sort(key=lambda p: p.get("createdAt") or "")

        owner_id = payload.get("ownerId")
        payload["owner"] = next(
            (
                {"id": p["id"], "nickname": p.get("nickname")}
                for p in participants
                if p["id"] == owner_id
            ),
            None,
        )
        payload["participants"] = participants
        return cast("Group", payload)

    @staticmethod
    def update_group(
        db: Client, group_id: str, owner_password: str, changes: dict[str, Any]
    ) -> dict[str, Any]:
        """Apply a partial update after checking the owner's password."""
        group_doc = GroupService.get_group_doc(db, group_id)
        GroupService._check_owner_password(db, group_doc, owner_password)

        if changes:
            changes = dict(changes, updatedAt=firestore.SERVER_TIMESTAMP)
            group_doc.reference.update(changes)
            current_app.logger.info(
                f"Group {group_id} updated: {sorted(k for k in changes if k != 'updatedAt')}"
            )

        return serialize_document(cast("DocumentSnapshot", group_doc.reference.get()))

    @staticmethod
    def _delete_group_children(db: Client, group_id: str) -> int:
        refs = []
        for collection in (RECORDS_COLLECTION, PARTICIPANTS_COLLECTION):
            query = db.collection(collection).where(
                filter=firestore.FieldFilter("groupId", "==", group_id)
            )
            refs.extend(doc.reference for doc in query.stream())

        for start in range(0, len(refs), FIRESTORE_BATCH_LIMIT):
            batch = db.batch()
            for ref in refs[start : start + FIRESTORE_BATCH_LIMIT]:
                batch.delete(ref)
            batch.commit()
        return len(refs)

    @staticmethod
    def delete_group(db: Client, group_id: str, owner_password: str) -> None:
        """Delete a group together with its participants and records."""
        group_doc = GroupService.get_group_doc(db, group_id)
        GroupService._check_owner_password(db, group_doc, owner_password)

        deleted = GroupService._delete_group_children(db, group_id)
        group_doc.reference.delete()
        current_app.logger.info(
            f"Group {group_id} deleted along with {deleted} documents."
        )

