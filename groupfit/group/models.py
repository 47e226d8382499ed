"""Data models for the group blueprint."""

from __future__ import annotations

from typing import Any, TypedDict

from groupfit.core.types import FirestoreDocument


class ParticipantSummary(TypedDict):
    """Public view of a participant; never carries the password."""

    id: str
    nickname: str


class Group(FirestoreDocument, total=False):
    """A group document in Firestore."""

    name: str
    description: str
    photoUrl: str
    goalRep: int
    tags: list[str]
    discordWebhookUrl: str
    discordInviteUrl: str
    likeCount: int
    participantCount: int
    badges: list[str]
    ownerId: str | None

    # UI and calculated fields
    owner: ParticipantSummary | None
    participants: list[dict[str, Any]]


class RankingEntry(TypedDict):
    """One row of a group leaderboard."""

    participantId: str
    nickname: str
    recordCount: int
    recordTime: int


# Fields a group owner may change after creation.
EDITABLE_GROUP_FIELDS = (
    "name",
    "description",
    "photoUrl",
    "goalRep",
    "tags",
    "discordWebhookUrl",
    "discordInviteUrl",
)
