"""Monotonic transaction id counter."""

from __future__ import annotations


class TxidSequencer:
    """Hands out transaction ids for successful mutations.

    Starts at zero. ``next()`` returns the current value and advances by one,
    so the first successful mutation gets txid 0. Python ints never overflow.

    Thread-safety: NOT thread-safe. The registry serializes all entry points.
    """

    _value: int

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError(f"txid cannot be negative, got {start}")
        self._value = start

    def next(self) -> int:
        """Allocate a txid. Only call once all checks for a mutation passed."""
        txid = self._value
        self._value += 1
        return txid

    @property
    def current(self) -> int:
        """The txid the next successful mutation will receive."""
        return self._value

    def __repr__(self) -> str:
        return f"TxidSequencer(current={self._value})"
