"""Service for group badge evaluation."""

from __future__ import annotations

from typing import TYPE_CHECKING, cast

from firebase_admin import firestore
from flask import current_app

from groupfit.core.constants import (
    GROUPS_COLLECTION,
    PARTICIPANTS_COLLECTION,
    RECORDS_COLLECTION,
)

from .models import BADGES, BadgeEvaluation

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client


def compute_badges(
    participant_count: int, record_count: int, like_count: int
) -> set[str]:
    """Return the badge codes implied by the current counters."""
    counters = {
        "PARTICIPANT_10": participant_count,
        "RECORD_100": record_count,
        "LIKE_100": like_count,
    }
    return {
        code
        for code, badge in BADGES.items()
        if counters[code] >= badge["threshold"]
    }


def count_in_group(db: Client, collection: str, group_id: str) -> int:
    """Count documents of ``collection`` that belong to ``group_id``."""
    return (
        db.collection(collection)
        .where(filter=firestore.FieldFilter("groupId", "==", group_id))
        .count()
        .get()[0][0]
        .value
    )


class BadgeService:
    """Service class for badge-related operations."""

    @staticmethod
    def evaluate_group_badges(db: Client, group_id: str) -> BadgeEvaluation | None:
        """Recompute a group's badges from its live counters.

        Badges follow the counters in both directions: a group that drops
        below a threshold loses the badge. Nothing is written when the
        computed set matches the stored one. Returns None for a missing group.
        """
        group_ref = db.collection(GROUPS_COLLECTION).document(group_id)
        group_doc = cast("DocumentSnapshot", group_ref.get())
        if not group_doc.exists:
            return None

        group_data = group_doc.to_dict() or {}
        stored_badges = group_data.get("badges") or []

        participant_count = count_in_group(db, PARTICIPANTS_COLLECTION, group_id)
        record_count = count_in_group(db, RECORDS_COLLECTION, group_id)
        like_count = group_data.get("likeCount", 0)

        new_badges = compute_badges(participant_count, record_count, like_count)
        if new_badges == set(stored_badges):
            return BadgeEvaluation(updated=False, badges=list(stored_badges))

        sorted_badges = sorted(new_badges)
        group_ref.update(
            {"badges": sorted_badges, "updatedAt": firestore.SERVER_TIMESTAMP}
        )
        return BadgeEvaluation(updated=True, badges=sorted_badges)

    @staticmethod
    def refresh_group_badges(db: Client, group_id: str) -> BadgeEvaluation | None:
        """Re-evaluate badges after a mutation without ever failing the caller."""
        try:
            result = BadgeService.evaluate_group_badges(db, group_id)
        except Exception as e:
            current_app.logger.error(f"Error updating badges for group {group_id}: {e}")
            return None

        if result and result.updated:
            current_app.logger.info(
                f"Badges for group {group_id} updated to {result.badges}"
            )
        return result
