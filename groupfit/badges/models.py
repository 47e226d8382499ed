"""Badge definitions for the groupfit application."""

from __future__ import annotations

from dataclasses import dataclass, field

from groupfit.core.constants import (
    LIKE_BADGE_THRESHOLD,
    PARTICIPANT_BADGE_THRESHOLD,
    RECORD_BADGE_THRESHOLD,
)

BADGES = {
    "PARTICIPANT_10": {
        "name": "Crowd",
        "desc": f"{PARTICIPANT_BADGE_THRESHOLD} or more participants",
        "threshold": PARTICIPANT_BADGE_THRESHOLD,
    },
    "RECORD_100": {
        "name": "Workhorse",
        "desc": f"{RECORD_BADGE_THRESHOLD} or more exercise records",
        "threshold": RECORD_BADGE_THRESHOLD,
    },
    "LIKE_100": {
        "name": "Fan Favorite",
        "desc": f"{LIKE_BADGE_THRESHOLD} or more likes",
        "threshold": LIKE_BADGE_THRESHOLD,
    },
}


@dataclass
class BadgeEvaluation:
    """Outcome of a badge recomputation for one group."""

    updated: bool
    badges: list[str] = field(default_factory=list)
