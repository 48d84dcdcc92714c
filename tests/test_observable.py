from __future__ import annotations

from typing import List

import pytest

from undo_engine.observable import EventChannel, ObservableFlag, SuspendableFlag


def test_event_channel_delivers_in_subscription_order() -> None:
    channel: EventChannel[str] = EventChannel()
    seen: List[str] = []

    channel.subscribe(lambda value: seen.append(f"first:{value}"))
    channel.subscribe(lambda value: seen.append(f"second:{value}"))
    channel.emit("a")

    assert seen == ["first:a", "second:a"]


def test_unsubscribe_stops_delivery_and_is_idempotent() -> None:
    channel: EventChannel[int] = EventChannel()
    seen: List[int] = []

    subscription = channel.subscribe(seen.append)
    channel.emit(1)
    subscription.unsubscribe()
    subscription.unsubscribe()
    channel.emit(2)

    assert seen == [1]
    assert subscription.is_active is False
    assert channel.subscriber_count == 0


def test_nested_emit_is_delivered_synchronously() -> None:
    channel: EventChannel[int] = EventChannel()
    seen: List[int] = []

    def relay(value: int) -> None:
        seen.append(value)
        if value < 3:
            channel.emit(value + 1)

    channel.subscribe(relay)
    channel.emit(1)

    assert seen == [1, 2, 3]


def test_subscriber_removed_during_delivery_is_skipped() -> None:
    channel: EventChannel[int] = EventChannel()
    seen: List[str] = []
    later = None

    def first(value: int) -> None:
        seen.append("first")
        assert later is not None
        later.unsubscribe()

    channel.subscribe(first)
    later = channel.subscribe(lambda value: seen.append("later"))
    channel.emit(0)

    assert seen == ["first"]


def test_observable_flag_notifies_only_on_transition() -> None:
    flag = ObservableFlag(False)
    transitions: List[bool] = []
    flag.subscribe(transitions.append)

    flag.set(False)
    flag.set(True)
    flag.set(True)
    flag.set(False)

    assert transitions == [True, False]
    assert bool(flag) is False


def test_suspendable_flag_resets_after_exception() -> None:
    flag = SuspendableFlag()
    transitions: List[bool] = []
    flag.subscribe(transitions.append)

    with pytest.raises(RuntimeError):
        with flag.suspended():
            assert flag.value is True
            raise RuntimeError("boom")

    assert flag.value is False
    assert transitions == [True, False]


def test_suspendable_flag_counts_nested_blocks() -> None:
    flag = SuspendableFlag()

    with flag.suspended():
        with flag.suspended():
            assert flag.value is True
        assert flag.value is True

    assert flag.value is False
