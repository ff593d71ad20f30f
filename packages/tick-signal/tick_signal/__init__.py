"""tick-signal - Synchronous signals for the tick engine."""
from __future__ import annotations

from tick_signal.signal import Connection, Signal

__all__ = ["Connection", "Signal"]
