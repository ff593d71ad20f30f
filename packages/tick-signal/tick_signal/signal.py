"""Synchronous multi-subscriber signal with disposable connections."""
from __future__ import annotations

from typing import Any, Callable

_Handler = Callable[..., None]


class Connection:
    """Handle returned by ``Signal.connect``. Disconnecting is idempotent."""

    __slots__ = ("_signal", "_handler", "_connected", "_pinned")

    def __init__(self, signal: Signal, handler: _Handler, pinned: bool = False) -> None:
        self._signal = signal
        self._handler = handler
        self._connected = True
        self._pinned = pinned

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def pinned(self) -> bool:
        return self._pinned

    def disconnect(self) -> None:
        if not self._connected:
            return
        self._connected = False
        self._signal._remove(self)

    def __repr__(self) -> str:
        state = "connected" if self._connected else "disconnected"
        return f"<Connection {self._handler!r} {state}>"


class Signal:
    """Fires handlers immediately, in subscription order.

    ``fire`` walks a snapshot of the connections taken when it starts:
    handlers connected during a fire wait for the next one, handlers
    disconnected during a fire are skipped.
    """

    def __init__(self) -> None:
        self._connections: list[Connection] = []

    def connect(self, handler: _Handler, *, pinned: bool = False) -> Connection:
        """Subscribe ``handler``.

        A pinned connection survives ``disconnect_all``; only its own
        ``disconnect`` removes it.
        """
        conn = Connection(self, handler, pinned)
        self._connections.append(conn)
        return conn

    def once(self, handler: _Handler) -> Connection:
        conn: Connection

        def _fire_once(*args: Any) -> None:
            conn.disconnect()
            handler(*args)

        conn = self.connect(_fire_once)
        return conn

    def fire(self, *args: Any) -> None:
        for conn in list(self._connections):
            if conn._connected:
                conn._handler(*args)

    def disconnect_all(self) -> None:
        """Drop every subscription except pinned ones."""
        snapshot = self._connections
        self._connections = [conn for conn in snapshot if conn._pinned]
        for conn in snapshot:
            if not conn._pinned:
                conn._connected = False

    def _remove(self, conn: Connection) -> None:
        try:
            self._connections.remove(conn)
        except ValueError:
            pass

    def __len__(self) -> int:
        return len(self._connections)
