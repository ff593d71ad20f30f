"""Unit tests for Signal and Connection."""
from __future__ import annotations

import pytest

from tick_signal import Connection, Signal


def test_connect_and_fire():
    """Connected handler receives the fired arguments immediately."""
    signal = Signal()
    received = []

    signal.connect(lambda *args: received.append(args))
    signal.fire("hero", 42)

    assert received == [("hero", 42)]


def test_fire_without_subscribers():
    """Firing with no subscribers is a no-op (no error)."""
    signal = Signal()
    signal.fire(1, 2, 3)  # Should not raise


def test_fire_with_no_arguments():
    signal = Signal()
    received = []

    signal.connect(lambda *args: received.append(args))
    signal.fire()

    assert received == [()]


def test_handler_subscription_order():
    """Handlers run in exact subscription order."""
    signal = Signal()
    order = []

    signal.connect(lambda: order.append(1))
    signal.connect(lambda: order.append(2))
    signal.connect(lambda: order.append(3))
    signal.fire()

    assert order == [1, 2, 3]


def test_connect_returns_connection():
    signal = Signal()
    conn = signal.connect(lambda: None)

    assert isinstance(conn, Connection)
    assert conn.connected
    assert len(signal) == 1


def test_disconnect():
    """Disconnected handler is not called by later fires."""
    signal = Signal()
    received = []

    conn = signal.connect(lambda x: received.append(x))
    signal.fire(1)
    conn.disconnect()
    signal.fire(2)

    assert received == [1]
    assert not conn.connected
    assert len(signal) == 0


def test_disconnect_is_idempotent():
    signal = Signal()
    conn = signal.connect(lambda: None)

    conn.disconnect()
    conn.disconnect()  # Should not raise

    assert len(signal) == 0


def test_disconnect_one_of_many():
    signal = Signal()
    received_a = []
    received_b = []
    received_c = []

    signal.connect(lambda x: received_a.append(x))
    conn_b = signal.connect(lambda x: received_b.append(x))
    signal.connect(lambda x: received_c.append(x))

    conn_b.disconnect()
    signal.fire("msg")

    assert received_a == ["msg"]
    assert received_b == []
    assert received_c == ["msg"]


def test_same_handler_connected_twice():
    """Each connection invokes the handler; disconnecting one leaves the other."""
    signal = Signal()
    call_count = 0

    def handler() -> None:
        nonlocal call_count
        call_count += 1

    first = signal.connect(handler)
    signal.connect(handler)
    signal.fire()
    assert call_count == 2

    first.disconnect()
    signal.fire()
    assert call_count == 3


def test_once_fires_a_single_time():
    signal = Signal()
    received = []

    conn = signal.once(lambda x: received.append(x))
    signal.fire("a")
    signal.fire("b")

    assert received == ["a"]
    assert not conn.connected
    assert len(signal) == 0


def test_once_disconnected_before_firing():
    signal = Signal()
    received = []

    conn = signal.once(lambda x: received.append(x))
    conn.disconnect()
    signal.fire("a")

    assert received == []


def test_disconnect_all():
    signal = Signal()
    received = []

    conn_a = signal.connect(lambda: received.append("a"))
    conn_b = signal.connect(lambda: received.append("b"))
    signal.disconnect_all()
    signal.fire()

    assert received == []
    assert not conn_a.connected
    assert not conn_b.connected
    assert len(signal) == 0


def test_handler_connected_during_fire_waits_for_next_fire():
    signal = Signal()
    order = []

    def late() -> None:
        order.append("late")

    def first() -> None:
        order.append("first")
        signal.connect(late)

    signal.connect(first)
    signal.fire()
    assert order == ["first"]

    signal.fire()
    assert order == ["first", "first", "late"]


def test_handler_disconnected_during_fire_is_skipped():
    signal = Signal()
    order = []
    conns: list[Connection] = []

    def first() -> None:
        order.append("first")
        conns[1].disconnect()

    conns.append(signal.connect(first))
    conns.append(signal.connect(lambda: order.append("second")))
    signal.fire()

    assert order == ["first"]


def test_nested_fire_runs_synchronously():
    """A handler firing the same signal re-enters immediately, not deferred."""
    signal = Signal()
    order = []

    def handler(depth: int) -> None:
        order.append(depth)
        if depth < 2:
            signal.fire(depth + 1)

    signal.connect(handler)
    signal.fire(0)

    assert order == [0, 1, 2]


def test_handler_exception_propagates():
    signal = Signal()
    received = []

    def boom() -> None:
        raise RuntimeError("boom")

    signal.connect(boom)
    signal.connect(lambda: received.append("after"))

    with pytest.raises(RuntimeError, match="boom"):
        signal.fire()
    assert received == []


def test_disconnect_all_keeps_pinned_connections():
    signal = Signal()
    received = []

    pinned = signal.connect(lambda: received.append("pinned"), pinned=True)
    plain = signal.connect(lambda: received.append("plain"))
    signal.disconnect_all()
    signal.fire()

    assert received == ["pinned"]
    assert pinned.connected and pinned.pinned
    assert not plain.connected
    assert len(signal) == 1


def test_pinned_connection_disconnects_itself():
    signal = Signal()
    received = []

    pinned = signal.connect(lambda: received.append("pinned"), pinned=True)
    pinned.disconnect()
    signal.fire()

    assert received == []
    assert len(signal) == 0
