"""Change notification for the grid's external owner.

After every successful mutation the grid controller hands the full,
materialized row list to the notifier, which forwards it synchronously.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from ..debug_trace import get_logger

logger = get_logger(__name__)

OnChange = Callable[[list[dict[str, Any]]], None]


class ChangeNotifier:
    """Forwards the current row list to the owner and any observers.

    The owner callback (on_change) is the contract with the component's
    user; observers are secondary listeners such as the view. Every
    notify() call reaches each of them exactly once. There is no batching,
    debouncing or suppression of unchanged lists.
    """

    def __init__(self, on_change: OnChange | None = None):
        """Initialize the notifier.

        Args:
            on_change: Owner callback receiving list of row dicts (with "key")
        """
        self._on_change = on_change
        self._observers: list[OnChange] = []
        self._notify_count = 0

    @property
    def notify_count(self) -> int:
        """Number of notifications sent so far."""
        return self._notify_count

    def add_observer(self, callback: OnChange) -> None:
        """Add an observer callback."""
        if callback not in self._observers:
            self._observers.append(callback)

    def remove_observer(self, callback: OnChange) -> None:
        """Remove an observer callback."""
        if callback in self._observers:
            self._observers.remove(callback)

    def notify(self, records: list[dict[str, Any]]) -> None:
        """Send the current rows to the owner, then to observers.

        Each recipient gets its own copy of the list so one can't alter
        what the next sees. Observers are notified even if the owner
        raises; the owner's exception then propagates. Observer exceptions
        are logged and don't stop the remaining observers.
        """
        self._notify_count += 1
        logger.debug("notify #%d: %d rows", self._notify_count, len(records))

        try:
            if self._on_change is not None:
                self._on_change([dict(record) for record in records])
        finally:
            self._notify_observers(records)

    def _notify_observers(self, records: list[dict[str, Any]]) -> None:
        for callback in list(self._observers):
            try:
                callback([dict(record) for record in records])
            except Exception:
                logger.exception("Change observer %r failed", callback)
