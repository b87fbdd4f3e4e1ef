"""Application-wide constants.

This module centralizes magic numbers used by the recommendation and mastery
engine. Values that need to be configurable at runtime should go in
config.py instead.
"""

from dailycode.shared.models import Difficulty, Topic


# ===================
# Mastery Scoring
# ===================

MIN_MASTERY_LEVEL = 0
MAX_MASTERY_LEVEL = 100

# Share of the overall success rate that counts towards mastery (0-60 points)
SUCCESS_RATE_WEIGHT = 0.6

# Difficulty mix bonus: weighted share of medium/hard solves, times 25
MEDIUM_SOLVE_WEIGHT = 1.5
HARD_SOLVE_WEIGHT = 2.5
DIFFICULTY_BONUS_SCALE = 25

# Consistency bonus: full 15 points once this many problems were attempted
CONSISTENCY_FULL_ATTEMPTS = 10
CONSISTENCY_BONUS_SCALE = 15

# Recommended difficulty boundaries (lower-inclusive)
MEDIUM_MASTERY_THRESHOLD = 40
HARD_MASTERY_THRESHOLD = 70


# ===================
# Topic Progression
# ===================

# Topics with mastery below this are candidates for reinforcement
WEAK_TOPIC_THRESHOLD = 70

# Difficulty when reinforcing a weak topic
WEAK_TOPIC_EASY_BELOW = 30
WEAK_TOPIC_MEDIUM_BELOW = 60

# Topics at or above this are not reintroduced as new topics
INTRODUCED_TOPIC_THRESHOLD = 50

# Canonical order in which untouched topics are introduced
TOPIC_PROGRESSION = (
    Topic.ARRAYS,
    Topic.STRINGS,
    Topic.STACK,
    Topic.QUEUE,
    Topic.LINKED_LIST,
    Topic.TREES,
    Topic.GRAPHS,
    Topic.DYNAMIC_PROGRAMMING,
)

# Starting point for new users and for degraded recommendations
DEFAULT_TOPIC = Topic.ARRAYS
DEFAULT_DIFFICULTY = Difficulty.EASY


# ===================
# Daily Recommendation
# ===================

DAILY_RECOMMENDATION_PRIORITY = 1
DAILY_RECOMMENDATION_SCORE = 100
MIN_RECOMMENDATION_PRIORITY = 1
MAX_RECOMMENDATION_PRIORITY = 10

MIN_FEEDBACK_RATING = 1
MAX_FEEDBACK_RATING = 5

# Hints shown before the problem is solved
VISIBLE_HINTS_UNSOLVED = 2


# ===================
# Performance Analysis
# ===================

ANALYSIS_WINDOW = 20
STRONG_TOPIC_MIN_ATTEMPTS = 3
STRONG_TOPIC_SOLVE_RATIO = 0.7
WEAK_TOPIC_MIN_ATTEMPTS = 2
WEAK_TOPIC_SOLVE_RATIO = 0.5

# Number of weakest topics surfaced on the mastery overview
FOCUS_TOPIC_COUNT = 3


# ===================
# Pagination
# ===================

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
