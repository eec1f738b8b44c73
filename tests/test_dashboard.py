# tests/test_dashboard.py
from vocab_drill.dashboard import get_accuracy_color, get_learning_stats, get_revision_words
from vocab_drill.models import ItemProgress, LearningStatus, SessionRecord
from vocab_drill.progress import ProgressStore

NOW = 1_700_000_000_000


def test_stats_with_no_progress(pool):
    stats = get_learning_stats(pool, ProgressStore(), [], now=NOW, today="2024-05-01")
    assert stats["total"] == len(pool)
    assert stats["completed"] == 0
    assert stats["accuracy"] == 0
    assert stats["new_count"] == len(pool)
    assert stats["due_count"] == len(pool)
    assert stats["streak"] == 0


def test_stats_with_progress(pool):
    store = ProgressStore({
        "w1": ItemProgress(status=LearningStatus.MASTERED, correct_count=5, next_review=NOW + 1),
        "w2": ItemProgress(status=LearningStatus.LEARNING, correct_count=1, incorrect_count=2, next_review=NOW),
        "w3": ItemProgress(status=LearningStatus.REVIEWING, correct_count=2, next_review=NOW + 1),
        "gone": ItemProgress(status=LearningStatus.MASTERED, correct_count=9),
    })
    history = [SessionRecord("2024-04-30", 70, 3), SessionRecord("2024-05-01", 90, 4)]
    stats = get_learning_stats(pool, store, history, now=NOW, today="2024-05-01")
    assert stats["completed"] == 3
    assert stats["correct"] == 8
    assert stats["incorrect"] == 2
    assert stats["accuracy"] == 80
    assert stats["advice"] == "GOOD"
    assert stats["mastered_count"] == 1
    assert stats["learning_count"] == 1
    assert stats["reviewing_count"] == 1
    assert stats["new_count"] == len(pool) - 3
    assert stats["due_count"] == 1 + len(pool) - 3
    assert stats["streak"] == 2


def test_revision_words(pool):
    store = ProgressStore({
        "w1": ItemProgress(status=LearningStatus.REVIEWING, correct_count=1, incorrect_count=1),
        "w2": ItemProgress(status=LearningStatus.LEARNING, incorrect_count=3),
        "w3": ItemProgress(status=LearningStatus.REVIEWING, correct_count=4),
    })
    words = get_revision_words(pool, store)
    assert [w["word"] for w in words] == ["apple", "run"]
    assert words[0]["error_rate"] == 50.0
    assert words[1]["status"] == "learning"


def test_accuracy_color():
    assert get_accuracy_color(90) == "green"
    assert get_accuracy_color(75) == "yellow"
    assert get_accuracy_color(10) == "red"
