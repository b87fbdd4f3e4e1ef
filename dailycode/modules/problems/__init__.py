"""Problems Module - Problem catalog and random selection.

Usage:
    from dailycode.modules.problems import ProblemSelector
    selector = ProblemSelector(uow.problems)
    problem = await selector.select(Topic.ARRAYS, Difficulty.EASY)
"""

from dailycode.modules.problems.interface import (
    Example,
    IProblemRepository,
    Problem,
    TestCase,
)
from dailycode.modules.problems.selector import ProblemSelector

__all__ = [
    # Interface types
    "Example",
    "IProblemRepository",
    "Problem",
    "TestCase",
    # Selection
    "ProblemSelector",
]
