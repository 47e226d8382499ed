"""Service layer for participant operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore
from flask import current_app

from groupfit.badges.services import BadgeService
from groupfit.core.constants import GROUPS_COLLECTION, PARTICIPANTS_COLLECTION
from groupfit.errors import (
    DuplicateResourceError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from groupfit.utils import serialize_document

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


class ParticipantService:
    """Service class for participant-related operations."""

    @staticmethod
    def to_public(doc: DocumentSnapshot) -> dict[str, Any]:
        """Serialize a participant without its password."""
        return serialize_document(doc, exclude=("password",))

    @staticmethod
    def find_by_nickname(
        db: Client, group_id: str, nickname: str
    ) -> DocumentSnapshot | None:
        """Return the participant of a group with the given nickname, if any."""
        query = (
            db.collection(PARTICIPANTS_COLLECTION)
            .where(filter=firestore.FieldFilter("groupId", "==", group_id))
            .where(filter=firestore.FieldFilter("nickname", "==", nickname))
            .limit(1)
        )
        docs = list(query.stream())
        return docs[0] if docs else None

    @staticmethod
    def authenticate(
        db: Client, group_id: str, nickname: str, password: str
    ) -> DocumentSnapshot:
        """Check a nickname/password pair within a group."""
        participant = ParticipantService.find_by_nickname(db, group_id, nickname)
        if participant is None or (participant.to_dict() or {}).get("password") != password:
            raise UnauthorizedError("Nickname or password does not match.")
        return participant

    @staticmethod
    def add_participant(
        db: Client, group_id: str, nickname: str, password: str
    ) -> DocumentSnapshot:
        """Write a participant and bump the group's participant counter together."""
        participant_ref = db.collection(PARTICIPANTS_COLLECTION).document()
        group_ref = db.collection(GROUPS_COLLECTION).document(group_id)

        batch = db.batch()
        batch.set(
            participant_ref,
            {
                "groupId": group_id,
                "nickname": nickname,
                "password": password,
                "createdAt": firestore.SERVER_TIMESTAMP,
            },
        )
        batch.update(group_ref, {"participantCount": firestore.Increment(1)})
        batch.commit()
        return cast("DocumentSnapshot", participant_ref.get())

    @staticmethod
    def join_group(
        db: Client, group_id: str, nickname: str, password: str
    ) -> dict[str, Any]:
        """Add a new participant to a group."""
        group_doc = cast(
            "DocumentSnapshot",
            db.collection(GROUPS_COLLECTION).document(group_id).get(),
        )
        if not group_doc.exists:
            raise NotFoundError("Group not found.", path="groupId")

        # TODO: move the nickname check and the write into one transaction so
        # two simultaneous joins with the same nickname cannot both succeed.
        if ParticipantService.find_by_nickname(db, group_id, nickname) is not None:
            raise DuplicateResourceError(
                "Nickname is already taken in this group.", path="nickname"
            )

        participant_doc = ParticipantService.add_participant(
            db, group_id, nickname, password
        )
        current_app.logger.info(
            f"Participant {participant_doc.id} joined group {group_id}."
        )

        BadgeService.refresh_group_badges(db, group_id)

        payload = ParticipantService.to_public(participant_doc)
        payload["group"] = serialize_document(group_doc)
        return payload

    @staticmethod
    def leave_group(db: Client, group_id: str, nickname: str, password: str) -> None:
        """Remove a participant from a group after checking their password.

        Records authored by the participant are kept; their ``authorId`` is
        left pointing at the removed participant.
        """
        group_doc = cast(
            "DocumentSnapshot",
            db.collection(GROUPS_COLLECTION).document(group_id).get(),
        )
        if not group_doc.exists:
            raise NotFoundError("Group not found.", path="groupId")

        participant = ParticipantService.find_by_nickname(db, group_id, nickname)
        if participant is None:
            raise NotFoundError("Participant not found.", path="nickname")
        if (participant.to_dict() or {}).get("password") != password:
            raise UnauthorizedError("Password does not match.", path="password")
        if (group_doc.to_dict() or {}).get("ownerId") == participant.id:
            raise ValidationError(
                "The group owner cannot leave; delete the group instead.",
                path="nickname",
            )

        batch = db.batch()
        batch.delete(participant.reference)
        batch.update(group_doc.reference, {"participantCount": firestore.Increment(-1)})
        batch.commit()
        current_app.logger.info(f"Participant {participant.id} left group {group_id}.")

        BadgeService.refresh_group_badges(db, group_id)
