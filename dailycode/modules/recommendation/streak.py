"""Streak tracking over completed daily recommendations."""

import logging
from datetime import date, datetime, timedelta
from typing import Sequence
from uuid import UUID

from dailycode.modules.recommendation.interface import DailyRecommendation, DayActivity, StreakInfo
from dailycode.shared.datetime_utils import Clock, SystemClock, days_back, to_day
from dailycode.shared.exceptions import UserNotFoundError
from dailycode.shared.repository import UnitOfWork, UnitOfWorkFactory

logger = logging.getLogger(__name__)

DEFAULT_LOOKBACK_DAYS = 30
RECENT_ACTIVITY_DAYS = 7


class StreakService:
    """Derives consecutive-day completion streaks.

    A day counts when the user's recommendation for that UTC day is
    completed. The walk starts at the given day inclusive and looks back
    at most `lookback_days` days.
    """

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        clock: Clock | None = None,
        lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock or SystemClock()
        self._lookback_days = lookback_days

    def _day(self, as_of: date | datetime | None) -> date:
        return to_day(as_of) if as_of is not None else self._clock.today()

    async def _walk(
        self, uow: UnitOfWork, user_id: UUID, day: date
    ) -> tuple[int, Sequence[DailyRecommendation]]:
        start = day - timedelta(days=self._lookback_days - 1)
        recent = await uow.recommendations.list_between(user_id, start, day)
        completed = {rec.date for rec in recent if rec.completed}

        streak = 0
        for checked in days_back(day, self._lookback_days):
            if checked not in completed:
                break
            streak += 1
        return streak, recent

    async def compute_current_streak(self, user_id: UUID, as_of: date | datetime | None = None) -> int:
        """Number of consecutive completed days ending at `as_of`."""
        async with self._uow_factory() as uow:
            streak, _ = await self._walk(uow, user_id, self._day(as_of))
        return streak

    async def refresh(self, user_id: UUID, as_of: date | datetime | None = None) -> StreakInfo:
        """Recompute and store the user's current and longest streak.

        The longest streak never decreases.

        Raises:
            UserNotFoundError: If the user does not exist
        """
        day = self._day(as_of)
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            current, recent = await self._walk(uow, user_id, day)
            longest = max(user.longest_streak, current)
            if current != user.current_streak or longest != user.longest_streak:
                await uow.users.update_streaks(user_id, current, longest)
                logger.debug(f"Streak for user {user_id}: current={current}, longest={longest}")

        return StreakInfo(
            current_streak=current,
            longest_streak=longest,
            recent_activity=[
                DayActivity(date=rec.date, completed=rec.completed, skipped=rec.skipped)
                for rec in recent[:RECENT_ACTIVITY_DAYS]
            ],
        )

    async def refresh_active_users(self, as_of: date | datetime | None = None) -> tuple[int, list[str]]:
        """Refresh the streak of every active user, isolating failures.

        Returns:
            Number of users refreshed and the per-user error messages
        """
        day = self._day(as_of)
        async with self._uow_factory() as uow:
            users = await uow.users.list_active()

        refreshed = 0
        errors: list[str] = []
        for user in users:
            try:
                await self.refresh(user.id, day)
                refreshed += 1
            except Exception as e:
                logger.exception(f"Failed to update streak for user {user.id}")
                errors.append(f"{user.id}: {e}")

        logger.info(f"Updated streaks for {refreshed} users")
        return refreshed, errors
