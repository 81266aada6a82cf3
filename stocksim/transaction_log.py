"""
Transaction log: append-only, in-memory record of executed trades.

Kept for audit and inspection during a session. Not persisted.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator

import pandas as pd

from stocksim.trade import Side, Trade

TRADE_COLUMNS = ["trade_id", "timestamp", "owner", "symbol", "side", "quantity", "price"]


class TransactionLog:
    """Trades in execution order. Entries can be read but never changed or removed."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._trades: list[Trade] = []

    def append(self, trade: Trade) -> None:
        if not isinstance(trade, Trade):
            raise TypeError(f"expected Trade, got {type(trade).__name__}")
        with self._lock:
            self._trades.append(trade)

    def trades(
        self,
        *,
        symbol: str | None = None,
        side: Side | None = None,
    ) -> list[Trade]:
        """Copy of the recorded trades, optionally filtered by symbol and/or side."""
        with self._lock:
            out = list(self._trades)
        if symbol is not None:
            out = [t for t in out if t.symbol == symbol]
        if side is not None:
            out = [t for t in out if t.side == side]
        return out

    def last(self) -> Trade | None:
        with self._lock:
            return self._trades[-1] if self._trades else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._trades)

    def __iter__(self) -> Iterator[Trade]:
        return iter(self.trades())

    def to_frame(self) -> pd.DataFrame:
        """Trades as a DataFrame, one row per trade, side as its string value."""
        rows = [
            {
                "trade_id": t.trade_id,
                "timestamp": t.timestamp,
                "owner": t.owner,
                "symbol": t.symbol,
                "side": t.side.value,
                "quantity": t.quantity,
                "price": t.price,
            }
            for t in self.trades()
        ]
        return pd.DataFrame(rows, columns=TRADE_COLUMNS)
