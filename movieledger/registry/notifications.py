"""
Notification Log.

Append-only, ordered record of every event the ledger emits.

INVARIANTS:
- Entries are never updated or removed
- Sequence numbers are monotonic, starting at 1
- Entry order equals mutation order
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogEntry:
    sequence: int
    event: Any  # MovieAdded or MovieRated


class NotificationLog:
    """
    Ordered event channel for ledger notifications.

    The ledger appends while holding its own lock, so entries
    are recorded in exactly the order mutations were applied.
    Listeners are called synchronously in subscription order.
    """

    def __init__(self):
        self._entries: List[LogEntry] = []
        self._sequence_counter = 0
        self._listeners: List[Callable[[Any], None]] = []

    def __len__(self) -> int:
        return len(self._entries)

    def subscribe(self, listener: Callable[[Any], None]) -> None:
        """Register a callback invoked with each emitted event."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[Any], None]) -> None:
        self._listeners.remove(listener)

    def emit(self, event) -> LogEntry:
        """
        Append event to the log, then notify listeners.

        The mutation behind the event is already committed, so a
        failing listener is logged and the remaining listeners still
        run; the caller's operation succeeds.

        Returns:
            The created log entry
        """
        self._sequence_counter += 1
        entry = LogEntry(sequence=self._sequence_counter, event=event)
        self._entries.append(entry)
        logger.debug(f"Emitted #{entry.sequence} {event.event}")

        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(
                    f"Listener {listener!r} failed on #{entry.sequence} {event.event}: {e}",
                    exc_info=True
                )

        return entry

    def entries(self) -> List[LogEntry]:
        return list(self._entries)

    def events(self) -> List[Any]:
        """All emitted events, oldest first."""
        return [entry.event for entry in self._entries]

    def events_of(self, kind: str) -> List[Any]:
        """Emitted events with the given event name (e.g. "MovieRated")."""
        return [entry.event for entry in self._entries if entry.event.event == kind]
