"""Tests for the in-memory progress store."""
from vocab_drill.models import Grade, ItemProgress, LearningStatus
from vocab_drill.progress import ProgressStore, lookup_progress
from vocab_drill.sm2 import DAY_MS

NOW = 1_700_000_000_000


def test_get_missing_item_returns_default_without_storing():
    store = ProgressStore()
    p = store.get("w1", now=NOW)
    assert p.status == LearningStatus.NEW
    assert p.ease_factor == 2.5
    assert p.repetition == 0
    assert p.last_reviewed == 0
    assert p.next_review == NOW
    assert "w1" not in store
    assert len(store) == 0


def test_grade_stores_replacement_record():
    store = ProgressStore()
    updated = store.grade("w1", Grade.GOOD, now=NOW)
    assert store.get("w1") == updated
    assert updated.repetition == 1
    assert updated.correct_count == 1


def test_recall_stores_record():
    store = ProgressStore()
    store.recall("w1", False, now=NOW)
    assert store.get("w1").incorrect_count == 1
    assert store.get("w1").status == LearningStatus.LEARNING


def test_grading_one_id_leaves_others_untouched():
    store = ProgressStore()
    store.grade("w1", Grade.GOOD, now=NOW)
    before = store.get("w2", now=NOW)
    store.grade("w1", Grade.FORGOT, now=NOW)
    assert "w2" not in store
    assert store.get("w2", now=NOW) == before


def test_due_ids():
    store = ProgressStore()
    store.grade("w1", Grade.FORGOT, now=NOW)
    store.grade("w2", Grade.GOOD, now=NOW)
    assert store.due_ids(now=NOW) == ["w1"]
    assert sorted(store.due_ids(now=NOW + DAY_MS)) == ["w1", "w2"]


def test_stats_counts_statuses():
    store = ProgressStore({
        "a": ItemProgress(status=LearningStatus.MASTERED, next_review=NOW + DAY_MS),
        "b": ItemProgress(status=LearningStatus.LEARNING, next_review=NOW),
        "c": ItemProgress(status=LearningStatus.REVIEWING, next_review=NOW - 1),
    })
    stats = store.stats(now=NOW)
    assert stats["total"] == 3
    assert stats["mastered"] == 1
    assert stats["learning"] == 1
    assert stats["reviewing"] == 1
    assert stats["new"] == 0
    assert stats["due"] == 2


def test_schedule_buckets():
    store = ProgressStore({
        "now": ItemProgress(next_review=NOW),
        "tomorrow": ItemProgress(next_review=NOW + DAY_MS),
        "week": ItemProgress(next_review=NOW + 5 * DAY_MS),
        "later": ItemProgress(next_review=NOW + 30 * DAY_MS),
    })
    schedule = store.schedule(now=NOW)
    assert schedule["today"] == ["now"]
    assert schedule["tomorrow"] == ["tomorrow"]
    assert schedule["this_week"] == ["week"]
    assert schedule["later"] == ["later"]


def test_reset_item_and_all():
    store = ProgressStore()
    store.grade("w1", Grade.GOOD, now=NOW)
    store.grade("w2", Grade.GOOD, now=NOW)
    store.reset_item("w1")
    assert "w1" not in store
    store.reset_item("missing")  # no error
    store.reset_all()
    assert len(store) == 0


def test_dict_round_trip_is_lossless():
    store = ProgressStore()
    store.grade("w1", Grade.EASY, now=NOW)
    store.grade("w1", Grade.HARD, now=NOW + 5)
    store.recall("w2", True, now=NOW)
    restored = ProgressStore.from_dict(store.to_dict())
    assert restored.get("w1") == store.get("w1")
    assert restored.get("w2") == store.get("w2")
    assert restored.to_dict()["w1"]["status"] == "reviewing"


def test_lookup_progress_accepts_plain_dict():
    records = {"w1": ItemProgress(correct_count=3)}
    assert lookup_progress(records, "w1").correct_count == 3
    assert lookup_progress(records, "w2", now=NOW).status == LearningStatus.NEW
    assert lookup_progress(None, "w2", now=NOW).next_review == NOW
