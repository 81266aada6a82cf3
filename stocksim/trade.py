"""
Trade: immutable record of one executed buy or sell.

Created by the account on a successful fill; appended to the transaction log,
never mutated or removed.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Side(Enum):
    BUY = "buy"
    SELL = "sell"


def _trade_id() -> str:
    return f"trade-{uuid.uuid4().hex[:12]}"


@dataclass(frozen=True)
class Trade:
    """A filled order as seen by the simulator."""

    owner: str
    symbol: str
    side: Side
    quantity: int
    price: float
    timestamp: datetime = field(default_factory=datetime.now)
    trade_id: str = field(default_factory=_trade_id)

    @property
    def notional(self) -> float:
        """Cash that changed hands: price * quantity."""
        return self.price * self.quantity
