"""Synchronous event channels and boolean flags with change notification."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class Subscription:
    """Handle returned by ``subscribe``; cancels the registration once."""

    def __init__(self, cancel: Optional[Callable[[], None]] = None) -> None:
        self._cancel = cancel

    @property
    def is_active(self) -> bool:
        return self._cancel is not None

    def unsubscribe(self) -> None:
        cancel, self._cancel = self._cancel, None
        if cancel is not None:
            cancel()


@dataclass(eq=False, slots=True)
class _Registration:
    callback: Callable[[Any], None]
    active: bool = True


class _Listeners(Generic[T]):
    """Ordered callback list that tolerates (un)subscription during delivery."""

    def __init__(self) -> None:
        self._registrations: List[_Registration] = []

    def add(self, callback: Callable[[T], None]) -> Subscription:
        if not callable(callback):
            raise TypeError("callback must be callable")
        registration = _Registration(callback)
        self._registrations.append(registration)

        def cancel() -> None:
            registration.active = False
            self._registrations = [
                item for item in self._registrations if item is not registration
            ]

        return Subscription(cancel)

    def notify(self, value: T) -> None:
        for registration in tuple(self._registrations):
            if registration.active:
                registration.callback(value)

    def clear(self) -> None:
        for registration in self._registrations:
            registration.active = False
        self._registrations = []

    def __len__(self) -> int:
        return len(self._registrations)


class EventChannel(Generic[T]):
    """Push-based stream of values delivered synchronously to subscribers.

    Emitting from inside a subscriber is allowed; the nested emission is
    delivered completely before the outer one continues.
    """

    def __init__(self) -> None:
        self._listeners: _Listeners[T] = _Listeners()

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        return self._listeners.add(callback)

    def emit(self, value: T) -> None:
        self._listeners.notify(value)

    @property
    def subscriber_count(self) -> int:
        return len(self._listeners)


class ObservableFlag:
    """Boolean value that notifies subscribers when it flips."""

    def __init__(self, value: bool = False) -> None:
        self._value = bool(value)
        self._listeners: _Listeners[bool] = _Listeners()

    @property
    def value(self) -> bool:
        return self._value

    def __bool__(self) -> bool:
        return self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value})"

    def subscribe(self, callback: Callable[[bool], None]) -> Subscription:
        return self._listeners.add(callback)

    def set(self, value: bool) -> None:
        value = bool(value)
        if value == self._value:
            return
        self._value = value
        self._listeners.notify(value)

    def release(self) -> None:
        """Drop every subscriber without notifying them."""

        self._listeners.clear()


class SuspendableFlag(ObservableFlag):
    """Flag that reads ``True`` while at least one ``suspended()`` block runs."""

    def __init__(self) -> None:
        super().__init__(False)
        self._depth = 0

    @contextmanager
    def suspended(self) -> Iterator[None]:
        self._depth += 1
        try:
            if self._depth == 1:
                super().set(True)
            yield
        finally:
            self._depth -= 1
            if self._depth == 0:
                super().set(False)

    def set(self, value: bool) -> None:  # pragma: no cover - guard
        raise AttributeError("SuspendableFlag is driven by suspended() only")


__all__ = [
    "Subscription",
    "EventChannel",
    "ObservableFlag",
    "SuspendableFlag",
]
