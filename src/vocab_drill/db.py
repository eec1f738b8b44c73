"""Database initialization, connection management and state persistence."""
import json
import os
import sqlite3
from pathlib import Path

from loguru import logger

from vocab_drill.models import ItemProgress, LearningStatus, SessionRecord, VocabularyItem

DEFAULT_DB_PATH = os.environ.get(
    "VOCAB_DRILL_DB", str(Path.home() / ".vocab_drill" / "vocab.db")
)

SCHEMA = """
CREATE TABLE IF NOT EXISTS vocabulary (
    id TEXT PRIMARY KEY,
    position INTEGER NOT NULL,
    word TEXT NOT NULL,
    definition TEXT NOT NULL,
    part_of_speech TEXT,
    example TEXT,
    synonyms TEXT DEFAULT '[]'
);

CREATE TABLE IF NOT EXISTS item_progress (
    item_id TEXT PRIMARY KEY,
    status TEXT NOT NULL DEFAULT 'new',
    correct_count INTEGER NOT NULL DEFAULT 0,
    incorrect_count INTEGER NOT NULL DEFAULT 0,
    ease_factor REAL NOT NULL DEFAULT 2.5,
    interval INTEGER NOT NULL DEFAULT 0,
    repetition INTEGER NOT NULL DEFAULT 0,
    last_reviewed INTEGER NOT NULL DEFAULT 0,
    next_review INTEGER NOT NULL DEFAULT 0
);

CREATE TABLE IF NOT EXISTS session_history (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    date TEXT NOT NULL,
    accuracy INTEGER NOT NULL,
    words_studied INTEGER NOT NULL
);

CREATE TABLE IF NOT EXISTS user_settings (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    key TEXT NOT NULL UNIQUE,
    value TEXT
);
"""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory and foreign keys enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating all tables if they don't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


# --- Vocabulary ---


def save_vocabulary(db_path: str, items: list[VocabularyItem]) -> int:
    """Append items to the pool, skipping ids already present. Returns rows added."""
    conn = get_connection(db_path)
    start = conn.execute("SELECT COALESCE(MAX(position), -1) + 1 FROM vocabulary").fetchone()[0]
    added = 0
    for offset, item in enumerate(items):
        cur = conn.execute(
            """INSERT OR IGNORE INTO vocabulary
            (id, position, word, definition, part_of_speech, example, synonyms)
            VALUES (?, ?, ?, ?, ?, ?, ?)""",
            (item.id, start + offset, item.word, item.definition, item.part_of_speech,
             item.example, json.dumps(list(item.synonyms))),
        )
        added += cur.rowcount
    conn.commit()
    conn.close()
    logger.info(f"Saved {added} vocabulary items")
    return added


def load_vocabulary(db_path: str) -> list[VocabularyItem]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM vocabulary ORDER BY position").fetchall()
    conn.close()
    return [
        VocabularyItem(
            id=r["id"],
            word=r["word"],
            definition=r["definition"],
            part_of_speech=r["part_of_speech"],
            example=r["example"],
            synonyms=tuple(json.loads(r["synonyms"] or "[]")),
        )
        for r in rows
    ]


def clear_vocabulary(db_path: str) -> None:
    conn = get_connection(db_path)
    conn.execute("DELETE FROM vocabulary")
    conn.commit()
    conn.close()


# --- Progress ---


def save_progress(db_path: str, records: dict) -> None:
    """Upsert each item's full progress record."""
    conn = get_connection(db_path)
    for item_id, p in records.items():
        conn.execute(
            """INSERT INTO item_progress
            (item_id, status, correct_count, incorrect_count, ease_factor, interval,
             repetition, last_reviewed, next_review)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(item_id) DO UPDATE SET
                status=excluded.status, correct_count=excluded.correct_count,
                incorrect_count=excluded.incorrect_count, ease_factor=excluded.ease_factor,
                interval=excluded.interval, repetition=excluded.repetition,
                last_reviewed=excluded.last_reviewed, next_review=excluded.next_review""",
            (item_id, p.status.value, p.correct_count, p.incorrect_count, p.ease_factor,
             p.interval, p.repetition, p.last_reviewed, p.next_review),
        )
    conn.commit()
    conn.close()


def load_progress(db_path: str) -> dict[str, ItemProgress]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM item_progress").fetchall()
    conn.close()
    return {
        r["item_id"]: ItemProgress(
            status=LearningStatus(r["status"]),
            correct_count=r["correct_count"],
            incorrect_count=r["incorrect_count"],
            ease_factor=r["ease_factor"],
            interval=r["interval"],
            repetition=r["repetition"],
            last_reviewed=r["last_reviewed"],
            next_review=r["next_review"],
        )
        for r in rows
    }


def clear_progress(db_path: str) -> None:
    conn = get_connection(db_path)
    conn.execute("DELETE FROM item_progress")
    conn.commit()
    conn.close()


# --- Session history ---


def save_history(db_path: str, history: list[SessionRecord]) -> None:
    """Replace the stored history with ``history``."""
    conn = get_connection(db_path)
    conn.execute("DELETE FROM session_history")
    conn.executemany(
        "INSERT INTO session_history (date, accuracy, words_studied) VALUES (?, ?, ?)",
        [(s.date, s.accuracy, s.words_studied) for s in history],
    )
    conn.commit()
    conn.close()


def load_history(db_path: str) -> list[SessionRecord]:
    conn = get_connection(db_path)
    rows = conn.execute("SELECT * FROM session_history ORDER BY id").fetchall()
    conn.close()
    return [SessionRecord(date=r["date"], accuracy=r["accuracy"], words_studied=r["words_studied"]) for r in rows]
