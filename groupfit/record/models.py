"""Data models for the record blueprint."""

from __future__ import annotations

from typing import TypedDict

from groupfit.core.types import FirestoreDocument
from groupfit.group.models import ParticipantSummary


class Record(FirestoreDocument, total=False):
    """An exercise record document in Firestore."""

    groupId: str
    authorId: str | None
    # Snapshot of the author at write time
    author: ParticipantSummary
    exerciseType: str
    description: str
    time: int
    distance: float
    photos: list[str]


class RecordSubmission(TypedDict):
    """Validated payload for a new record."""

    exerciseType: str
    description: str
    time: int
    distance: float
    photos: list[str]
    authorNickname: str
    authorPassword: str
