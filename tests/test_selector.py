"""Tests for review-priority ordering."""
import random

from vocab_drill.models import ItemProgress, LearningStatus
from vocab_drill.selector import due_items, select_for_session

NOW = 1_700_000_000_000


def test_orders_by_status_rank(pool):
    progress = {
        "w1": ItemProgress(status=LearningStatus.MASTERED),
        "w2": ItemProgress(status=LearningStatus.LEARNING),
        "w3": ItemProgress(status=LearningStatus.REVIEWING),
    }
    selected = select_for_session(pool[:4], progress, 4)
    # w4 has no record and counts as NEW
    assert [v.id for v in selected] == ["w3", "w4", "w2", "w1"]


def test_higher_error_rate_first_within_status(pool):
    progress = {
        "w1": ItemProgress(status=LearningStatus.REVIEWING, correct_count=9, incorrect_count=1),
        "w2": ItemProgress(status=LearningStatus.REVIEWING, correct_count=1, incorrect_count=3),
        "w3": ItemProgress(status=LearningStatus.REVIEWING, correct_count=2, incorrect_count=2),
    }
    selected = select_for_session(pool[:3], progress, 3)
    assert [v.id for v in selected] == ["w2", "w3", "w1"]


def test_ties_keep_pool_order(pool):
    selected = select_for_session(pool, {}, len(pool))
    assert selected == pool


def test_truncates_to_count(pool):
    assert len(select_for_session(pool, {}, 3)) == 3


def test_count_larger_than_pool_never_pads(pool):
    selected = select_for_session(pool, {}, 100)
    assert len(selected) == len(pool)
    assert len({v.id for v in selected}) == len(pool)


def test_zero_or_negative_count(pool):
    assert select_for_session(pool, {}, 0) == []
    assert select_for_session(pool, {}, -3) == []


def test_empty_pool():
    assert select_for_session([], {}, 5) == []


def test_random_tie_breaking_is_seedable(pool):
    a = select_for_session(pool, {}, 5, rng=random.Random(3))
    b = select_for_session(pool, {}, 5, rng=random.Random(3))
    assert a == b


def test_input_pool_not_reordered(pool):
    original = list(pool)
    select_for_session(pool, {"w8": ItemProgress(status=LearningStatus.REVIEWING)}, 3, rng=random.Random(1))
    assert pool == original


def test_due_items(pool):
    progress = {
        "w1": ItemProgress(next_review=NOW - 1),
        "w2": ItemProgress(next_review=NOW + 1000),
        "w3": ItemProgress(status=LearningStatus.REVIEWING, next_review=NOW),
    }
    due = due_items(pool[:3], progress, now=NOW)
    # untracked items are due; w2 is in the future
    assert [v.id for v in due] == ["w3", "w1"]
    due_with_new = due_items(pool[:4], progress, now=NOW)
    assert [v.id for v in due_with_new] == ["w3", "w1", "w4"]
