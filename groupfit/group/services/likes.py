"""Service for group like counting."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from firebase_admin import firestore
from flask import current_app

from groupfit.badges.services import BadgeService
from groupfit.core.constants import GROUPS_COLLECTION
from groupfit.errors import NotFoundError, ValidationError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction


class LikeService:
    """Service class for like-count mutations.

    Counters are only ever changed with ``firestore.Increment`` so concurrent
    likes never lose updates.
    """

    @staticmethod
    def _get_existing_group_ref(db: Client, group_id: str) -> DocumentReference:
        group_ref = db.collection(GROUPS_COLLECTION).document(group_id)
        group_doc = cast("DocumentSnapshot", group_ref.get())
        if not group_doc.exists:
            raise NotFoundError("Group not found.")
        return group_ref

    @staticmethod
    def increment_like(db: Client, group_id: str) -> None:
        """Add one like to a group."""
        group_ref = LikeService._get_existing_group_ref(db, group_id)
        group_ref.update({"likeCount": firestore.Increment(1)})
        current_app.logger.info(f"Group {group_id} liked.")

        BadgeService.refresh_group_badges(db, group_id)

    @staticmethod
    def _decrement_like_transaction(
        transaction: Transaction, group_ref: DocumentReference
    ) -> None:
        """Remove one like inside a transaction, refusing to go below zero."""
        group_doc = cast("DocumentSnapshot", group_ref.get(transaction=transaction))
        if not group_doc.exists:
            raise NotFoundError("Group not found.")

        like_count = (group_doc.to_dict() or {}).get("likeCount", 0)
        if like_count < 1:
            raise ValidationError("likeCount cannot go below zero.", path="likeCount")

        transaction.update(group_ref, {"likeCount": firestore.Increment(-1)})

    @staticmethod
    def decrement_like(db: Client, group_id: str) -> None:
        """Remove one like from a group."""
        group_ref = LikeService._get_existing_group_ref(db, group_id)
        decrement = firestore.transactional(LikeService._decrement_like_transaction)
        decrement(db.transaction(), group_ref)
        current_app.logger.info(f"Group {group_id} unliked.")

        BadgeService.refresh_group_badges(db, group_id)
