from __future__ import annotations

from typing import Callable

Listener = Callable[[int], None]


class RefreshSignal:
    """Monotonically increasing change token shared by producer and consumers.

    The value carries no data; listeners only learn that something changed.
    """

    def __init__(self, value: int = 0):
        self._value = value
        self._listeners: list[Listener] = []

    @property
    def value(self) -> int:
        return self._value

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def bump(self) -> int:
        self._value += 1
        for listener in list(self._listeners):
            listener(self._value)
        return self._value
