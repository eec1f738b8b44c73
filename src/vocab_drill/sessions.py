"""Rolling history of study sessions."""
from datetime import date, datetime, timedelta
from typing import Optional

from loguru import logger

from vocab_drill.models import SessionRecord
from vocab_drill.settings import SESSION_HISTORY_CAP
from vocab_drill.sm2 import round_half_up


def today_key(when: Optional[datetime] = None) -> str:
    return (when or datetime.now()).date().isoformat()


def record_session(
    history: list[SessionRecord],
    today: str,
    accuracy: float,
    words_studied: int,
    cap: int = SESSION_HISTORY_CAP,
) -> list[SessionRecord]:
    """Fold one session's outcome into the history and return a new list.

    A second session on the same day is merged: accuracy is averaged and
    words studied are summed. Otherwise the record is appended and the
    oldest entry dropped once the list is full.
    """
    accuracy = min(100, max(0, round_half_up(accuracy)))
    words_studied = max(0, int(words_studied))
    updated = list(history)
    for i, existing in enumerate(updated):
        if existing.date == today:
            updated[i] = SessionRecord(
                date=today,
                accuracy=round_half_up((existing.accuracy + accuracy) / 2),
                words_studied=existing.words_studied + words_studied,
            )
            logger.debug(f"Merged session into {today}: {updated[i]}")
            return updated

    while updated and len(updated) >= cap:
        updated.pop(0)
    updated.append(SessionRecord(date=today, accuracy=accuracy, words_studied=words_studied))
    return updated


def calc_streak(history: list[SessionRecord], today: str) -> int:
    """Consecutive study days ending today (or yesterday, if today has no session yet)."""
    days = {date.fromisoformat(s.date) for s in history}
    current = date.fromisoformat(today)
    if current not in days:
        current -= timedelta(days=1)
    streak = 0
    while current in days:
        streak += 1
        current -= timedelta(days=1)
    return streak


def get_learning_advice(accuracy: float) -> str:
    if accuracy >= 85:
        return "EXCELLENT"
    elif accuracy >= 70:
        return "GOOD"
    return "KEEP GOING"
