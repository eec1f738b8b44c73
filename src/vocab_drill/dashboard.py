"""Progress summary statistics."""
from typing import Optional

from vocab_drill.models import LearningStatus, SessionRecord, VocabularyItem
from vocab_drill.progress import ProgressStore
from vocab_drill.selector import select_for_session
from vocab_drill.sessions import calc_streak, get_learning_advice, today_key
from vocab_drill.sm2 import now_ms, round_half_up


def get_accuracy_color(score: float) -> str:
    if score >= 85:
        return "green"
    elif score >= 70:
        return "yellow"
    return "red"


def get_learning_stats(
    pool: list[VocabularyItem],
    store: ProgressStore,
    history: list[SessionRecord],
    now: Optional[int] = None,
    today: Optional[str] = None,
) -> dict:
    if now is None:
        now = now_ms()
    today = today or today_key()
    pool_ids = {item.id for item in pool}
    tracked = [(item_id, p) for item_id, p in store.items() if item_id in pool_ids]
    correct = sum(p.correct_count for _, p in tracked)
    incorrect = sum(p.incorrect_count for _, p in tracked)
    answered = correct + incorrect
    accuracy = round_half_up(correct / answered * 100) if answered else 0
    counts = {status: 0 for status in LearningStatus}
    for _, p in tracked:
        counts[p.status] += 1
    untracked = len(pool) - len(tracked)
    due = sum(1 for _, p in tracked if p.next_review <= now) + untracked
    return {
        "total": len(pool),
        "completed": len(tracked) - counts[LearningStatus.NEW],
        "correct": correct,
        "incorrect": incorrect,
        "accuracy": accuracy,
        "advice": get_learning_advice(accuracy),
        "streak": calc_streak(history, today),
        "new_count": counts[LearningStatus.NEW] + untracked,
        "learning_count": counts[LearningStatus.LEARNING],
        "reviewing_count": counts[LearningStatus.REVIEWING],
        "mastered_count": counts[LearningStatus.MASTERED],
        "due_count": due,
    }


def get_revision_words(pool: list[VocabularyItem], store: ProgressStore, limit: int = 5) -> list[dict]:
    """Tracked words with at least one miss, most urgent first."""
    missed = [item for item in pool if item.id in store and store.get(item.id).incorrect_count > 0]
    return [
        {
            "word": item.word,
            "definition": item.definition,
            "error_rate": round(store.get(item.id).error_rate * 100, 1),
            "status": store.get(item.id).status.value,
        }
        for item in select_for_session(missed, store, limit)
    ]
