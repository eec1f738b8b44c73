"""In-memory store of per-item learning progress."""
from dataclasses import asdict
from typing import Optional

from loguru import logger

from vocab_drill.models import ItemProgress, LearningStatus
from vocab_drill.sm2 import DAY_MS, apply_grade, apply_recall, is_due, new_progress, now_ms


def lookup_progress(progress, item_id: str, now: Optional[int] = None) -> ItemProgress:
    """Progress for an id from a ProgressStore or a plain mapping."""
    record = progress.get(item_id) if progress is not None else None
    if record is None:
        return new_progress(now)
    return record


class ProgressStore:
    """Progress records keyed by vocabulary item id.

    The caller owns the store: load it before use and persist it after
    grading. Every update replaces the whole record for one id.
    """

    def __init__(self, records: Optional[dict] = None):
        self._records: dict[str, ItemProgress] = dict(records or {})

    def __contains__(self, item_id: str) -> bool:
        return item_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def items(self):
        return self._records.items()

    def get(self, item_id: str, now: Optional[int] = None) -> ItemProgress:
        """Return the stored record, or a fresh NEW record if none exists."""
        record = self._records.get(item_id)
        if record is None:
            return new_progress(now)
        return record

    def put(self, item_id: str, record: ItemProgress) -> None:
        self._records[item_id] = record

    def grade(self, item_id: str, grade: int, now: Optional[int] = None) -> ItemProgress:
        updated = apply_grade(self.get(item_id, now), grade, now)
        self._records[item_id] = updated
        logger.debug(f"Graded {item_id}: {updated.status.value}, next in {updated.interval}d")
        return updated

    def recall(self, item_id: str, remembered: bool, now: Optional[int] = None) -> ItemProgress:
        updated = apply_recall(self.get(item_id, now), remembered, now)
        self._records[item_id] = updated
        return updated

    def due_ids(self, now: Optional[int] = None) -> list[str]:
        if now is None:
            now = now_ms()
        return [item_id for item_id, p in self._records.items() if is_due(p, now)]

    def stats(self, now: Optional[int] = None) -> dict:
        counts = {status: 0 for status in LearningStatus}
        for p in self._records.values():
            counts[p.status] += 1
        return {
            "total": len(self._records),
            "new": counts[LearningStatus.NEW],
            "learning": counts[LearningStatus.LEARNING],
            "reviewing": counts[LearningStatus.REVIEWING],
            "mastered": counts[LearningStatus.MASTERED],
            "due": len(self.due_ids(now)),
        }

    def schedule(self, now: Optional[int] = None) -> dict[str, list[str]]:
        """Bucket tracked ids by when they next come up for review."""
        if now is None:
            now = now_ms()
        buckets = {"today": [], "tomorrow": [], "this_week": [], "later": []}
        for item_id, p in self._records.items():
            days_ahead = (p.next_review - now) / DAY_MS
            if days_ahead <= 0:
                buckets["today"].append(item_id)
            elif days_ahead <= 1:
                buckets["tomorrow"].append(item_id)
            elif days_ahead <= 7:
                buckets["this_week"].append(item_id)
            else:
                buckets["later"].append(item_id)
        return buckets

    def reset_item(self, item_id: str) -> None:
        self._records.pop(item_id, None)

    def reset_all(self) -> None:
        logger.info(f"Clearing progress for {len(self._records)} items")
        self._records.clear()

    def to_dict(self) -> dict:
        return {
            item_id: {**asdict(p), "status": p.status.value}
            for item_id, p in self._records.items()
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProgressStore":
        records = {}
        for item_id, raw in data.items():
            records[item_id] = ItemProgress(
                status=LearningStatus(raw["status"]),
                correct_count=int(raw["correct_count"]),
                incorrect_count=int(raw["incorrect_count"]),
                ease_factor=float(raw["ease_factor"]),
                interval=int(raw["interval"]),
                repetition=int(raw["repetition"]),
                last_reviewed=int(raw["last_reviewed"]),
                next_review=int(raw["next_review"]),
            )
        return cls(records)
