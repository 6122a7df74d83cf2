"""
Observable holder of the local vote set.

The set is only ever replaced as a whole; nothing patches a single
record in place. Subscribers are told after every replacement and
every busy flag change.

19-10-2026
"""

import time
from typing import Callable, Iterable

from app.config import ACTIVE_WINDOW_SECONDS
from app.fhevote.model.schemas import VoteRecord, VoteStats


def compute_stats(records: Iterable[VoteRecord], now: float, active_window: int = ACTIVE_WINDOW_SECONDS) -> VoteStats:
    records = list(records)
    return VoteStats(
        total=len(records),
        verified=len([r for r in records if r.is_verified]),
        active=len([r for r in records if now - r.timestamp < active_window]),
    )


class VoteStore(object):

    BUSY_FLAGS = ("refreshing", "creating", "decrypting")

    def __init__(self, clock: Callable[[], float] = time.time, active_window: int = ACTIVE_WINDOW_SECONDS) -> None:
        self.clock = clock
        self.active_window = active_window
        self._records: tuple[VoteRecord, ...] = ()
        self._stats = VoteStats()
        self._busy = {flag: 0 for flag in self.BUSY_FLAGS}
        self._subscribers = []

    @property
    def records(self) -> tuple[VoteRecord, ...]:
        return self._records

    @property
    def stats(self) -> VoteStats:
        return self._stats

    def get(self, vote_id: str) -> VoteRecord | None:
        for record in self._records:
            if record.id == vote_id:
                return record
        return None

    def filter(self, search_term: str = "", verified_only: bool = False) -> list[VoteRecord]:
        term = (search_term or "").lower()
        return [
            record for record in self._records
            if (term in record.title.lower() or term in record.description.lower())
            and (not verified_only or record.is_verified)
        ]

    def replace(self, records: Iterable[VoteRecord]):
        """
        Swaps the whole record set and recomputes the stats. A later
        duplicate id replaces the earlier one, keeping the first position.
        """
        by_id = {}
        for record in records:
            by_id[record.id] = record
        self._records = tuple(by_id.values())
        self._stats = compute_stats(self._records, self.clock(), self.active_window)
        self._notify()

    def is_busy(self, flag: str) -> bool:
        return self._busy[flag] > 0

    def busy(self, flag: str):
        return _BusyFlag(self, flag)

    def subscribe(self, callback: Callable[["VoteStore"], None]) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def _notify(self):
        for callback in list(self._subscribers):
            callback(self)


class _BusyFlag(object):
    """
    Context manager raising a busy flag for the duration of a block.
    Nested or concurrent holders are counted.
    """

    def __init__(self, store: VoteStore, flag: str) -> None:
        self.store = store
        self.flag = flag

    def __enter__(self):
        self.store._busy[self.flag] += 1
        self.store._notify()
        return self.store

    def __exit__(self, exc_type, exc, tb):
        self.store._busy[self.flag] -= 1
        self.store._notify()
        return False
