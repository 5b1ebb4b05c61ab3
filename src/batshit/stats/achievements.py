"""Achievement catalogue and label thresholds.

Every achievement is a pure predicate over a user's current stats. The
``achievements`` column on ``user_stats`` only mirrors these; it is never
the source of truth.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol


class StatsLike(Protocol):
    ideas_submitted: int
    ratings_given: int
    average_rating_received: float
    total_ratings_received: int


@dataclass(frozen=True)
class Achievement:
    slug: str
    name: str
    description: str
    predicate: Callable[[StatsLike], bool]


ACHIEVEMENTS: list[Achievement] = [
    Achievement(
        slug="first_timer",
        name="First Timer",
        description="Submit your first idea",
        predicate=lambda s: s.ideas_submitted > 0,
    ),
    Achievement(
        slug="idea_machine",
        name="Idea Machine",
        description="Submit 10+ ideas",
        predicate=lambda s: s.ideas_submitted >= 10,
    ),
    Achievement(
        slug="judge_judy",
        name="Judge Judy",
        description="Rate 100+ ideas",
        predicate=lambda s: s.ratings_given >= 100,
    ),
    Achievement(
        slug="certifiably_insane",
        name="Certifiably Insane",
        description="Average rating 9+ with 10+ ratings",
        predicate=lambda s: s.average_rating_received >= 9 and s.total_ratings_received >= 10,
    ),
]

ACHIEVEMENTS_BY_SLUG: dict[str, Achievement] = {a.slug: a for a in ACHIEVEMENTS}


def evaluate_achievements(stats: StatsLike) -> list[str]:
    """Slugs of every achievement currently unlocked, in catalogue order."""
    return [a.slug for a in ACHIEVEMENTS if a.predicate(stats)]


def compute_batshit_score(average_rating_received: float, total_ratings_received: int) -> int:
    """0-100 score: the received average scaled by ten. Zero until rated."""
    if total_ratings_received <= 0:
        return 0
    return max(0, min(100, round(average_rating_received * 10)))


# (minimum mean score, label), highest first.
RATING_LABELS: list[tuple[float, str]] = [
    (9, "Absolutely Batshit"),
    (7, "Certified Crazy"),
    (5, "Getting Weird"),
    (3, "Mildly Quirky"),
]


def rating_label(average: float) -> str:
    """Human label for a mean rating on the 1-10 scale."""
    for threshold, label in RATING_LABELS:
        if average >= threshold:
            return label
    return "Boringly Sane"


# (exclusive lower bound on user-minus-global, label, blurb), highest first.
PERSONALITIES: list[tuple[float, str, str]] = [
    (1.5, "Chaos Enthusiast", "You see batshit potential everywhere!"),
    (0.5, "Creative Optimist", "You're more open to wild ideas than most."),
    (-0.5, "Balanced Judge", "You're right in tune with the community."),
    (-1.5, "Practical Realist", "You prefer ideas with solid foundations."),
]


def rating_personality(user_average: float, global_average: float) -> tuple[str, str]:
    """Classify how a user's scores compare with everyone's. Returns (label, description)."""
    diff = user_average - global_average
    for bound, label, description in PERSONALITIES:
        if diff > bound:
            return label, description
    return "Logic Guardian", "You keep the community grounded!"
