"""SM-2 spaced repetition algorithm and the flashcard interval ladder."""
import math
import time
from dataclasses import replace
from typing import Optional

from loguru import logger

from vocab_drill.models import Grade, ItemProgress, LearningStatus

MIN_EASE_FACTOR = 1.3
MAX_INTERVAL = 365
DEFAULT_EASE_FACTOR = 2.5
DAY_MS = 24 * 60 * 60 * 1000
HOUR_MS = 60 * 60 * 1000

# Flashcard review ladder, indexed by familiarity bucket.
RECALL_INTERVALS_MS = [
    1 * HOUR_MS,
    6 * HOUR_MS,
    1 * DAY_MS,
    3 * DAY_MS,
    7 * DAY_MS,
    14 * DAY_MS,
    30 * DAY_MS,
]


def now_ms() -> int:
    return int(time.time() * 1000)


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def new_progress(now: Optional[int] = None) -> ItemProgress:
    """Default state for an item that has never been graded."""
    if now is None:
        now = now_ms()
    return ItemProgress(next_review=now)


def is_due(state: ItemProgress, now: Optional[int] = None) -> bool:
    if now is None:
        now = now_ms()
    return state.next_review <= now


def apply_grade(state: ItemProgress, grade: int, now: Optional[int] = None) -> ItemProgress:
    """Calculate the next review state using SM-2.

    Args:
        state: Current progress for the item
        grade: Rating 0-3 (0=forgot, 1=hard, 2=good, 3=easy); clamped
        now: Review time in ms (defaults to the current time)

    Returns:
        A new ItemProgress; the input is left untouched.
    """
    if now is None:
        now = now_ms()
    grade = Grade(min(max(int(grade), Grade.FORGOT), Grade.EASY))
    ease_factor = max(MIN_EASE_FACTOR, state.ease_factor)
    interval = min(max(state.interval, 0), MAX_INTERVAL)

    if grade == Grade.FORGOT:
        repetition = 0
        interval = 0
        status = LearningStatus.LEARNING
        correct_count = state.correct_count
        incorrect_count = state.incorrect_count + 1
    else:
        repetition = max(state.repetition, 0) + 1
        q = 5 - grade
        ease_factor = max(MIN_EASE_FACTOR, ease_factor + (0.1 - q * (0.08 + q * 0.02)))
        if repetition == 1:
            interval = 1
        elif repetition == 2:
            interval = 6
        else:
            # sub-day flashcard steps store interval 0
            interval = min(MAX_INTERVAL, round_half_up(max(interval, 1) * ease_factor))
        if repetition > 3 and grade == Grade.EASY:
            status = LearningStatus.MASTERED
        else:
            status = LearningStatus.REVIEWING
        correct_count = state.correct_count + 1
        incorrect_count = state.incorrect_count

    logger.debug(
        f"grade={grade.name} rep={repetition} interval={interval}d "
        f"ease={ease_factor:.2f} status={status.value}"
    )
    return replace(
        state,
        status=status,
        correct_count=correct_count,
        incorrect_count=incorrect_count,
        ease_factor=ease_factor,
        interval=interval,
        repetition=repetition,
        last_reviewed=now,
        next_review=now + interval * DAY_MS,
    )


def apply_recall(state: ItemProgress, remembered: bool, now: Optional[int] = None) -> ItemProgress:
    """Flashcard update from a remembered / not-remembered signal.

    Remembered items move up a coarse ladder (1h .. 1 month) chosen by the
    familiarity percentage; forgotten items are due again immediately.
    """
    if now is None:
        now = now_ms()
    if not remembered:
        return replace(
            state,
            status=LearningStatus.LEARNING,
            incorrect_count=state.incorrect_count + 1,
            interval=0,
            repetition=0,
            last_reviewed=now,
            next_review=now,
        )

    updated = replace(state, correct_count=state.correct_count + 1)
    bucket = min(len(RECALL_INTERVALS_MS) - 1, updated.familiarity // 20)
    step = RECALL_INTERVALS_MS[bucket]
    logger.debug(f"recall familiarity={updated.familiarity} bucket={bucket}")
    return replace(
        updated,
        status=LearningStatus.REVIEWING,
        interval=min(MAX_INTERVAL, step // DAY_MS),
        repetition=max(state.repetition, 0) + 1,
        last_reviewed=now,
        next_review=now + step,
    )
