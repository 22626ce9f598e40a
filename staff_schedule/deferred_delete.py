"""Optimistic delete with an undo window.

Items disappear from the local view immediately; the real delete is issued
only when the undo window expires or the view is flushed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from operator import attrgetter
from typing import Any, Callable, Dict, Hashable, MutableSequence, Optional, Protocol

from staff_schedule.errors import PersistenceError

logger = logging.getLogger(__name__)

DEFAULT_UNDO_WINDOW = 8.0

# Predecessor marker for an item that was first in the view.
_START = object()


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class TaskScheduler(Protocol):
    """Anything with ``call_later``, e.g. an ``asyncio`` event loop."""

    def call_later(self, delay: float, callback: Callable[[], Any]) -> TimerHandle: ...


class DeleteState(str, Enum):
    ACTIVE = "active"
    PENDING = "pending_delete"
    COMMITTED = "committed"
    RESTORED = "restored"


@dataclass
class _Pending:
    item: Any
    # Key of the element just before the item, pending ones included.
    after: Any
    timer: TimerHandle


class DeferredDeleteCoordinator:
    """
    Tracks pending deletes for one collection, each with its own timer.

    Args:
        items: The caller's local view; removed and restored in place
        delete: Persists a delete by id; raises ``PersistenceError`` on failure
        scheduler: Provides ``call_later`` for the undo timers
        undo_window: Seconds before a pending delete is committed
        key: Extracts the id from an item
        on_commit: Called with the id once the delete is persisted
        on_failure: Called with the id and error when persisting fails
    """

    def __init__(
        self,
        items: MutableSequence[Any],
        delete: Callable[[Hashable], Any],
        scheduler: TaskScheduler,
        undo_window: float = DEFAULT_UNDO_WINDOW,
        key: Callable[[Any], Hashable] = attrgetter("id"),
        on_commit: Optional[Callable[[Hashable], Any]] = None,
        on_failure: Optional[Callable[[Hashable, PersistenceError], Any]] = None,
    ):
        if undo_window <= 0:
            raise ValueError("undo_window must be positive")
        self.items = items
        self._delete = delete
        self._scheduler = scheduler
        self.undo_window = undo_window
        self._key = key
        self._on_commit = on_commit
        self._on_failure = on_failure
        self._pending: Dict[Hashable, _Pending] = {}
        self._states: Dict[Hashable, DeleteState] = {}

    @property
    def pending(self) -> tuple:
        return tuple(self._pending)

    def state(self, item_id) -> DeleteState:
        return self._states.get(item_id, DeleteState.ACTIVE)

    def _index_of(self, item_id) -> Optional[int]:
        for i, item in enumerate(self.items):
            if self._key(item) == item_id:
                return i
        return None

    def request_delete(self, item_id) -> None:
        """Remove the item from the view and arm its commit timer."""
        if item_id in self._pending:
            return
        index = self._index_of(item_id)
        if index is None:
            logger.debug("Delete requested for %s which is not in view", item_id)
            return

        after = self._key(self.items[index - 1]) if index else _START
        after = self._last_pending_after(after)
        item = self.items.pop(index)
        timer = self._scheduler.call_later(self.undo_window, lambda: self._commit(item_id))
        self._pending[item_id] = _Pending(item=item, after=after, timer=timer)
        self._states[item_id] = DeleteState.PENDING
        logger.info("Delete of %s pending for %.1fs", item_id, self.undo_window)

    def undo(self, item_id) -> bool:
        """Cancel a pending delete; False if nothing is pending for ``item_id``."""
        entry = self._pending.pop(item_id, None)
        if entry is None:
            return False
        entry.timer.cancel()
        self._restore(entry)
        self._states[item_id] = DeleteState.RESTORED
        logger.info("Delete of %s undone", item_id)
        return True

    def commit(self, item_id) -> bool:
        """Commit a pending delete now, without waiting for its timer."""
        entry = self._pending.get(item_id)
        if entry is None:
            return False
        entry.timer.cancel()
        return self._commit(item_id)

    def flush(self) -> None:
        """Commit every pending delete, e.g. when the view closes."""
        for item_id in list(self._pending):
            self.commit(item_id)

    def _last_pending_after(self, key):
        """Follow the chain of pending items that sit right after ``key``."""
        while True:
            follower = next((k for k, e in self._pending.items() if e.after == key), None)
            if follower is None:
                return key
            key = follower

    def _restore(self, entry: _Pending) -> None:
        key = entry.after
        while key is not _START and key in self._pending:
            key = self._pending[key].after
        if key is _START:
            index = 0
        else:
            found = self._index_of(key)
            index = len(self.items) if found is None else found + 1
        self.items.insert(index, entry.item)

    def _commit(self, item_id) -> bool:
        entry = self._pending.pop(item_id, None)
        if entry is None:
            return False
        self._states[item_id] = DeleteState.COMMITTED
        try:
            self._delete(item_id)
        except PersistenceError as e:
            logger.error("Delete of %s failed, restoring it: %s", item_id, e)
            self._restore(entry)
            self._states[item_id] = DeleteState.RESTORED
            if self._on_failure is not None:
                self._on_failure(item_id, e)
            return False

        for other in self._pending.values():
            if other.after == item_id:
                other.after = entry.after
        logger.info("Delete of %s committed", item_id)
        if self._on_commit is not None:
            self._on_commit(item_id)
        return True
