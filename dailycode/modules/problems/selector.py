"""Problem Selector - uniform random pick from the active catalog."""

import logging
import random

from dailycode.modules.problems.interface import IProblemRepository, Problem
from dailycode.shared.constants import DEFAULT_DIFFICULTY
from dailycode.shared.exceptions import NoActiveProblemsError
from dailycode.shared.models import Difficulty, Topic

logger = logging.getLogger(__name__)


class ProblemSelector:
    """Picks one active problem for a topic/difficulty pair.

    The pick is a uniformly random offset into the filtered, active-only set,
    so neither insertion order nor title order biases the result.
    """

    def __init__(self, problems: IProblemRepository, rng: random.Random | None = None) -> None:
        self._problems = problems
        self._rng = rng or random.Random()

    async def select(
        self,
        topic: Topic | None = None,
        difficulty: Difficulty = DEFAULT_DIFFICULTY,
    ) -> Problem:
        """Select one active problem.

        Args:
            topic: Topic filter, None for any topic
            difficulty: Difficulty filter

        Returns:
            A matching problem, or any active problem when nothing matches

        Raises:
            NoActiveProblemsError: If the catalog has no active problem at all
        """
        count = await self._problems.count_active(topic=topic, difficulty=difficulty)
        if count > 0:
            offset = self._rng.randrange(count)
            found = await self._problems.find_active(
                topic=topic, difficulty=difficulty, offset=offset, limit=1
            )
            if found:
                return found[0]
            # Catalog shrank between count and fetch
            logger.warning(f"Offset {offset} past end of {count} matching problems")

        logger.info(
            f"No active {difficulty.value} problems for topic {topic.value if topic else 'any'}, "
            "falling back to any active problem"
        )
        fallback = await self._problems.first_active()
        if fallback is None:
            raise NoActiveProblemsError()
        return fallback
