"""Tests for session history aggregation."""
from datetime import datetime

from vocab_drill.models import SessionRecord
from vocab_drill.sessions import calc_streak, get_learning_advice, record_session, today_key


def test_record_first_session():
    history = record_session([], "2024-05-01", 80, 5)
    assert history == [SessionRecord(date="2024-05-01", accuracy=80, words_studied=5)]


def test_same_day_sessions_accumulate():
    history = record_session([], "2024-05-01", 80, 5)
    history = record_session(history, "2024-05-01", 80, 5)
    assert history == [SessionRecord(date="2024-05-01", accuracy=80, words_studied=10)]


def test_same_day_accuracy_is_averaged():
    history = [SessionRecord("2024-05-01", 80, 4)]
    history = record_session(history, "2024-05-01", 75, 6)
    assert history[0].accuracy == 78  # 77.5 rounds up
    assert history[0].words_studied == 10


def test_new_day_appends():
    history = [SessionRecord("2024-05-01", 80, 4)]
    history = record_session(history, "2024-05-02", 60, 3)
    assert [s.date for s in history] == ["2024-05-01", "2024-05-02"]


def test_oldest_evicted_at_cap():
    history = [SessionRecord(f"2024-05-0{d}", 50, 1) for d in range(1, 6)]
    updated = record_session(history, "2024-05-06", 90, 2)
    assert len(updated) == 5
    assert updated[0].date == "2024-05-02"
    assert updated[-1].date == "2024-05-06"


def test_merge_does_not_evict_at_cap():
    history = [SessionRecord(f"2024-05-0{d}", 50, 1) for d in range(1, 6)]
    updated = record_session(history, "2024-05-05", 70, 2)
    assert len(updated) == 5
    assert updated[0].date == "2024-05-01"
    assert updated[-1] == SessionRecord("2024-05-05", 60, 3)


def test_input_is_not_mutated():
    history = [SessionRecord("2024-05-01", 80, 4)]
    snapshot = list(history)
    updated = record_session(history, "2024-05-01", 60, 1)
    assert history == snapshot
    assert updated is not history
    updated = record_session(history, "2024-05-02", 60, 1)
    assert history == snapshot


def test_custom_cap():
    history = []
    for day in range(1, 5):
        history = record_session(history, f"2024-05-0{day}", 50, 1, cap=2)
    assert [s.date for s in history] == ["2024-05-03", "2024-05-04"]


def test_accuracy_is_clamped():
    history = record_session([], "2024-05-01", 140, -3)
    assert history[0].accuracy == 100
    assert history[0].words_studied == 0


def test_streak():
    history = [
        SessionRecord("2024-05-01", 50, 1),
        SessionRecord("2024-05-03", 50, 1),
        SessionRecord("2024-05-04", 50, 1),
        SessionRecord("2024-05-05", 50, 1),
    ]
    assert calc_streak(history, "2024-05-05") == 3
    assert calc_streak(history, "2024-05-06") == 3  # today not studied yet
    assert calc_streak(history, "2024-05-08") == 0
    assert calc_streak([], "2024-05-05") == 0


def test_today_key():
    assert today_key(datetime(2024, 5, 1, 23, 59)) == "2024-05-01"


def test_learning_advice():
    assert get_learning_advice(90) == "EXCELLENT"
    assert get_learning_advice(85) == "EXCELLENT"
    assert get_learning_advice(72) == "GOOD"
    assert get_learning_advice(40) == "KEEP GOING"


def test_fractional_accuracy_rounds_half_up():
    assert record_session([], "2024-05-01", 79.6, 3)[0].accuracy == 80
    assert record_session([], "2024-05-01", 79.5, 3)[0].accuracy == 80
    assert record_session([], "2024-05-01", 79.4, 3)[0].accuracy == 79
