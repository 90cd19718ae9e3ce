"""
Battle log module for the battle engine.

The battle log is the player-facing, chronological record of a battle. It
is append-only and lets a presentation layer subscribe to new entries.
"""

from collections.abc import Callable

from catchery import log_debug

LogListener = Callable[[str], None]


class BattleLog:
    """
    Append-only chronological log of human-readable battle events.

    Listeners receive every entry appended after they subscribed,
    synchronously and in subscription order.
    """

    def __init__(self) -> None:
        self._entries: list[str] = []
        self._listeners: list[LogListener] = []

    def add(self, message: str) -> None:
        """
        Appends an entry and notifies the listeners.

        Args:
            message (str):
                The human-readable event description.

        """
        self._entries.append(message)
        log_debug(f"battle log: {message}")
        for listener in list(self._listeners):
            listener(message)

    def subscribe(self, listener: LogListener) -> Callable[[], None]:
        """
        Registers a listener for new entries.

        Args:
            listener (LogListener):
                Called with each new entry.

        Returns:
            Callable[[], None]:
                A function that removes the listener when called.

        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def entries(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def since(self, index: int) -> list[str]:
        """Returns the entries appended from position `index` onwards."""
        return self._entries[index:]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(tuple(self._entries))
