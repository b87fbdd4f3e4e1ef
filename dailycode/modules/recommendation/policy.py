"""Topic progression policy.

Decides which topic and difficulty a user's next problem should come from.
The rules are tried in order and the first one that applies wins:

1. New user (no progress at all): arrays, easy.
2. Weakest topic below 70 mastery. Ties go to the first record in input
   order. Easy below 30, medium below 60, hard otherwise.
3. First topic of the progression order that is not yet at 50 mastery and
   has never been attempted: easy.
4. Any topic; easy for beginners, medium otherwise.

Rule 2 looks at any stored mastery below 70, rule 3 only at topics with no
progress at all.
"""

from typing import Collection, Iterable

from dailycode.modules.mastery.interface import TopicMastery
from dailycode.modules.recommendation.interface import SelectionRule, TopicChoice
from dailycode.shared.constants import (
    DEFAULT_DIFFICULTY,
    DEFAULT_TOPIC,
    INTRODUCED_TOPIC_THRESHOLD,
    TOPIC_PROGRESSION,
    WEAK_TOPIC_EASY_BELOW,
    WEAK_TOPIC_MEDIUM_BELOW,
    WEAK_TOPIC_THRESHOLD,
)
from dailycode.shared.models import Difficulty, SkillLevel, Topic


def difficulty_for_weak_topic(mastery_level: int) -> Difficulty:
    if mastery_level < WEAK_TOPIC_EASY_BELOW:
        return Difficulty.EASY
    if mastery_level < WEAK_TOPIC_MEDIUM_BELOW:
        return Difficulty.MEDIUM
    return Difficulty.HARD


def choose_topic(
    masteries: Iterable[TopicMastery],
    attempted_topics: Collection[Topic],
    skill_level: SkillLevel = SkillLevel.BEGINNER,
) -> TopicChoice:
    """Pick the topic and difficulty for a user's next problem.

    Args:
        masteries: The user's stored topic masteries, in store order
        attempted_topics: Topics the user has at least one progress record in
        skill_level: The user's skill level, used by the fallback rule

    Returns:
        Exactly one TopicChoice
    """
    if not attempted_topics:
        return TopicChoice(DEFAULT_TOPIC, DEFAULT_DIFFICULTY, SelectionRule.NEW_USER)

    masteries = list(masteries)

    weak = [m for m in masteries if m.mastery_level < WEAK_TOPIC_THRESHOLD]
    if weak:
        weakest = min(weak, key=lambda m: m.mastery_level)
        return TopicChoice(
            weakest.topic,
            difficulty_for_weak_topic(weakest.mastery_level),
            SelectionRule.WEAKEST_TOPIC,
        )

    levels = {m.topic: m.mastery_level for m in masteries}
    for topic in TOPIC_PROGRESSION:
        if levels.get(topic, 0) >= INTRODUCED_TOPIC_THRESHOLD:
            continue
        if topic not in attempted_topics:
            return TopicChoice(topic, Difficulty.EASY, SelectionRule.NEW_TOPIC)

    difficulty = Difficulty.EASY if skill_level == SkillLevel.BEGINNER else Difficulty.MEDIUM
    return TopicChoice(None, difficulty, SelectionRule.FALLBACK)
