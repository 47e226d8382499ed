"""Service for group ranking aggregation."""

from __future__ import annotations

import datetime
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, cast

from firebase_admin import firestore

from groupfit.core.constants import (
    GROUPS_COLLECTION,
    PARTICIPANTS_COLLECTION,
    RANKING_LIMIT,
    RECORDS_COLLECTION,
    UNKNOWN_NICKNAME,
)
from groupfit.errors import NotFoundError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot
    from google.cloud.firestore_v1.client import Client

    from groupfit.group.models import RankingEntry


def rank_authors(
    records: Iterable[dict[str, Any]], limit: int = RANKING_LIMIT
) -> list[tuple[str, int, int]]:
    """Aggregate records per author and return the top ``limit`` rows.

    Each row is ``(author_id, record_count, total_time)``, ordered by record
    count, then total time, both descending, then author id ascending.
    Records without an author are ignored.
    """
    totals: dict[str, list[int]] = {}
    for record in records:
        author_id = record.get("authorId")
        if not author_id:
            continue
        entry = totals.setdefault(author_id, [0, 0])
        entry[0] += 1
        entry[1] += record.get("time") or 0

    rows = [(author_id, count, time) for author_id, (count, time) in totals.items()]
    rows.sort(key=lambda row: (-row[1], -row[2], row[0]))
    return rows[:limit]


class RankingService:
    """Service class for group leaderboards."""

    @staticmethod
    def _fetch_window_records(
        db: Client,
        group_id: str,
        window_start: datetime.datetime,
        window_end: datetime.datetime,
    ) -> list[dict[str, Any]]:
        query = (
            db.collection(RECORDS_COLLECTION)
            .where(filter=firestore.FieldFilter("groupId", "==", group_id))
            .where(filter=firestore.FieldFilter("createdAt", ">=", window_start))
            .where(filter=firestore.FieldFilter("createdAt", "<=", window_end))
        )
        return [doc.to_dict() or {} for doc in query.stream()]

    @staticmethod
    def _find_nicknames(db: Client, participant_ids: list[str]) -> dict[str, str]:
        refs = [
            db.collection(PARTICIPANTS_COLLECTION).document(pid)
            for pid in participant_ids
        ]
        nicknames = {}
        for doc in db.get_all(refs):
            if doc.exists:
                nicknames[doc.id] = (doc.to_dict() or {}).get("nickname")
        return nicknames

    @staticmethod
    def get_ranking(
        db: Client,
        group_id: str,
        window_start: datetime.datetime,
        window_end: datetime.datetime,
    ) -> list[RankingEntry]:
        """Return the top participants of a group within [start, end]."""
        group_doc = cast(
            "DocumentSnapshot",
            db.collection(GROUPS_COLLECTION).document(group_id).get(),
        )
        if not group_doc.exists:
            raise NotFoundError("Group not found.")

        records = RankingService._fetch_window_records(
            db, group_id, window_start, window_end
        )
        rows = rank_authors(records)
        if not rows:
            return []

        nicknames = RankingService._find_nicknames(db, [row[0] for row in rows])
        return [
            {
                "participantId": author_id,
                "nickname": nicknames.get(author_id) or UNKNOWN_NICKNAME,
                "recordCount": count,
                "recordTime": total_time,
            }
            for author_id, count, total_time in rows
        ]
