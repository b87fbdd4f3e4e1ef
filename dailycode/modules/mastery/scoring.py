"""Mastery scoring.

Pure functions turning a user's progress records in one topic into a
TopicMastery snapshot. Nothing here touches the store or the clock beyond
the timestamp passed in.

Score composition (0-100):
    base         success rate * 0.6                       (0-60)
    difficulty   weighted medium/hard share of solves * 25 (0-62.5)
    consistency  min(attempted / 10, 1) * 15              (0-15)
"""

import math
from dataclasses import replace
from datetime import datetime
from typing import Iterable
from uuid import UUID

from dailycode.modules.mastery.interface import TIERS, TopicMastery, empty_rates, empty_tiers
from dailycode.modules.progress.interface import Progress
from dailycode.shared.constants import (
    CONSISTENCY_BONUS_SCALE,
    CONSISTENCY_FULL_ATTEMPTS,
    DIFFICULTY_BONUS_SCALE,
    HARD_MASTERY_THRESHOLD,
    HARD_SOLVE_WEIGHT,
    MAX_MASTERY_LEVEL,
    MEDIUM_MASTERY_THRESHOLD,
    MEDIUM_SOLVE_WEIGHT,
    MIN_MASTERY_LEVEL,
    SUCCESS_RATE_WEIGHT,
)
from dailycode.shared.datetime_utils import utc_now
from dailycode.shared.models import Difficulty, Topic


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return math.floor(value + 0.5)


def difficulty_for_mastery(mastery_level: int) -> Difficulty:
    """Recommended tier for a mastery level (lower bounds inclusive)."""
    if mastery_level < MEDIUM_MASTERY_THRESHOLD:
        return Difficulty.EASY
    if mastery_level < HARD_MASTERY_THRESHOLD:
        return Difficulty.MEDIUM
    return Difficulty.HARD


def mastery_score(attempted: dict[str, int], solved: dict[str, int]) -> int | None:
    """Mastery level for per-tier counts, or None when nothing was attempted."""
    total_attempted = sum(attempted.values())
    if total_attempted == 0:
        return None
    total_solved = sum(solved.values())

    success_rate = total_solved / total_attempted * 100
    score = success_rate * SUCCESS_RATE_WEIGHT

    weighted = (
        solved[Difficulty.MEDIUM.value] * MEDIUM_SOLVE_WEIGHT
        + solved[Difficulty.HARD.value] * HARD_SOLVE_WEIGHT
    )
    score += weighted / max(total_solved, 1) * DIFFICULTY_BONUS_SCALE

    score += min(total_attempted / CONSISTENCY_FULL_ATTEMPTS, 1) * CONSISTENCY_BONUS_SCALE

    level = round_half_up(min(score, MAX_MASTERY_LEVEL))
    return max(MIN_MASTERY_LEVEL, min(MAX_MASTERY_LEVEL, level))


def compute_mastery(
    user_id: UUID,
    topic: Topic,
    records: Iterable[Progress],
    previous: TopicMastery | None = None,
    now: datetime | None = None,
) -> TopicMastery:
    """Rebuild the mastery snapshot for (user_id, topic) from its progress records.

    Records outside the topic are ignored. With no records the previous
    mastery level is kept (0 for a new document).

    Args:
        user_id: Owner of the records
        topic: Topic being scored
        records: The user's progress records
        previous: Stored snapshot, if any; its id and level are carried over
        now: Timestamp for last_updated

    Returns:
        A new TopicMastery; `previous` is not modified
    """
    attempted = empty_tiers()
    solved = empty_tiers()
    attempt_totals = empty_tiers()

    for record in records:
        if record.topic != topic:
            continue
        tier = record.difficulty.value
        attempted[tier] += 1
        attempt_totals[tier] += record.total_attempts
        if record.is_solved:
            solved[tier] += 1

    success_rates = empty_rates()
    average_attempts = {tier.value: 0.0 for tier in TIERS}
    for tier in TIERS:
        key = tier.value
        if attempted[key] > 0:
            success_rates[key] = solved[key] / attempted[key] * 100
            average_attempts[key] = attempt_totals[key] / attempted[key]

    total_attempted = sum(attempted.values())
    if total_attempted > 0:
        success_rates["overall"] = sum(solved.values()) / total_attempted * 100
    elif previous is not None:
        success_rates["overall"] = previous.success_rates.get("overall", 0.0)

    level = mastery_score(attempted, solved)
    if level is None:
        level = previous.mastery_level if previous is not None else MIN_MASTERY_LEVEL

    base = previous if previous is not None else TopicMastery(user_id=user_id, topic=topic)
    return replace(
        base,
        problems_attempted=attempted,
        problems_solved=solved,
        success_rates=success_rates,
        average_attempts=average_attempts,
        mastery_level=level,
        recommended_difficulty=difficulty_for_mastery(level),
        last_updated=now or utc_now(),
    )
