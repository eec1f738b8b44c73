"""Quiz and session defaults, with per-user overrides stored in the database."""
import json
import os

from vocab_drill.db import get_connection
from vocab_drill.models import Difficulty, TypeDistribution

DEFAULT_LOG_LEVEL = os.environ.get("VOCAB_DRILL_LOG_LEVEL", "WARNING")

QUIZ_QUESTION_COUNT = 10
FLASHCARD_SESSION_SIZE = 15
SESSION_HISTORY_CAP = 5
DEFAULT_TYPE_DISTRIBUTION = TypeDistribution(type_in=0.5, choice=0.3, drag_drop=0.2)

CHOICE_OPTIONS = {Difficulty.EASY: 2, Difficulty.MEDIUM: 4, Difficulty.HARD: 6}
DRAG_DROP_ITEMS = {Difficulty.EASY: 3, Difficulty.MEDIUM: 5, Difficulty.HARD: 7}

SCORE_CORRECT = 10
SCORE_INCORRECT = 0
TIME_BONUS = 5
TIME_BONUS_THRESHOLD = 10  # seconds


def get_setting(db_path: str, key: str, default: str = None) -> str | None:
    conn = get_connection(db_path)
    row = conn.execute("SELECT value FROM user_settings WHERE key = ?", (key,)).fetchone()
    conn.close()
    return row["value"] if row else default


def set_setting(db_path: str, key: str, value: str) -> None:
    conn = get_connection(db_path)
    conn.execute(
        "INSERT INTO user_settings (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value=?",
        (key, value, value),
    )
    conn.commit()
    conn.close()


def normalize_distribution(type_in: float, choice: float, drag_drop: float) -> TypeDistribution:
    """Clamp negative shares to zero and scale to sum to 1.

    An all-zero distribution falls back to the default mix.
    """
    parts = [max(0.0, float(p)) for p in (type_in, choice, drag_drop)]
    total = sum(parts)
    if total == 0:
        return DEFAULT_TYPE_DISTRIBUTION
    return TypeDistribution(*(p / total for p in parts))


def load_quiz_settings(db_path: str) -> dict:
    count = int(get_setting(db_path, "quiz_count", str(QUIZ_QUESTION_COUNT)))
    raw = get_setting(db_path, "quiz_distribution")
    if raw:
        data = json.loads(raw)
        distribution = normalize_distribution(
            data.get("type_in", 0), data.get("choice", 0), data.get("drag_drop", 0)
        )
    else:
        distribution = DEFAULT_TYPE_DISTRIBUTION
    return {"count": max(0, count), "distribution": distribution}


def save_quiz_settings(db_path: str, count: int, distribution: TypeDistribution) -> None:
    set_setting(db_path, "quiz_count", str(count))
    set_setting(db_path, "quiz_distribution", json.dumps({
        "type_in": distribution.type_in,
        "choice": distribution.choice,
        "drag_drop": distribution.drag_drop,
    }))
