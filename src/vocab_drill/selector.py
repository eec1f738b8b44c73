"""Review-urgency ordering for flashcard sessions and quizzes."""
import random
from typing import Optional

from loguru import logger

from vocab_drill.models import ItemProgress, LearningStatus, VocabularyItem
from vocab_drill.progress import lookup_progress
from vocab_drill.sm2 import is_due, now_ms

STATUS_RANK = {
    LearningStatus.REVIEWING: 0,
    LearningStatus.NEW: 1,
    LearningStatus.LEARNING: 2,
    LearningStatus.MASTERED: 3,
}


def priority_key(progress: ItemProgress) -> tuple:
    """Sort key: status rank first, then highest error rate first."""
    return (STATUS_RANK[progress.status], -progress.error_rate)


def select_for_session(
    pool: list[VocabularyItem],
    progress,
    count: int,
    rng: Optional[random.Random] = None,
) -> list[VocabularyItem]:
    """Order the pool by review urgency and keep the first ``count`` items.

    Ties keep pool order unless ``rng`` is given, in which case the pool is
    shuffled first so equal-priority items come out in random order.
    """
    limit = max(0, min(count, len(pool)))
    candidates = list(pool)
    if rng is not None:
        rng.shuffle(candidates)
    now = now_ms()
    candidates.sort(key=lambda item: priority_key(lookup_progress(progress, item.id, now)))
    selected = candidates[:limit]
    logger.debug(f"Selected {len(selected)} of {len(pool)} items")
    return selected


def due_items(pool: list[VocabularyItem], progress, now: Optional[int] = None) -> list[VocabularyItem]:
    """Items whose next review has passed, most urgent first.

    Items with no progress record are treated as due.
    """
    if now is None:
        now = now_ms()
    due = [item for item in pool if is_due(lookup_progress(progress, item.id, now), now)]
    return select_for_session(due, progress, len(due))
