"""
Account: cash and share positions with average cost basis.

Buys re-average the cost basis; sells leave it unchanged and report profit or
loss against it. Validation runs before any mutation, so a failed trade leaves
the account as it was.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime

import numpy as np
import pandas as pd

from stocksim.errors import (
    InsufficientFundsError,
    InsufficientSharesError,
    InvalidQuantityError,
    NotOwnedError,
)
from stocksim.market import Market
from stocksim.trade import Side, Trade

logger = logging.getLogger(__name__)

DEFAULT_OWNER = "Trader1"
DEFAULT_STARTING_CASH = 10_000.00

HOLDINGS_COLUMNS = ["symbol", "quantity", "average_cost", "price", "market_value", "unrealized_pnl"]


@dataclass(frozen=True)
class Position:
    """Quantity held in one symbol and its quantity-weighted average purchase price."""

    quantity: int
    average_cost: float

    @property
    def cost_total(self) -> float:
        return self.average_cost * self.quantity


def _check_quantity(quantity: object) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, (int, np.integer)) or quantity <= 0:
        raise InvalidQuantityError(quantity)
    return int(quantity)


@dataclass
class Account:
    """
    Single-user account. Mutable; updated only through buy() and sell().

    Mutations hold a per-account lock so concurrent commands cannot break the
    cash and cost-basis invariants.
    """

    owner: str = DEFAULT_OWNER
    cash: float = DEFAULT_STARTING_CASH
    holdings: dict[str, Position] = field(default_factory=dict)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.cash < 0:
            raise ValueError(f"cash must be >= 0, got {self.cash}")
        for sym, pos in self.holdings.items():
            if pos.quantity <= 0:
                raise ValueError(f"Position quantity must be > 0: {sym}={pos.quantity}")

    def position(self, symbol: str) -> Position | None:
        """Position held in symbol, or None."""
        return self.holdings.get(symbol)

    def quantity(self, symbol: str) -> int:
        """Shares held in symbol. 0 if not present."""
        pos = self.holdings.get(symbol)
        return pos.quantity if pos is not None else 0

    def tradeable_symbols(self, market: Market) -> list[str]:
        """Held symbols that are currently listed in the market."""
        return [sym for sym in self.holdings if sym in market]

    def value_portfolio(self, market: Market) -> float:
        """Holdings at current prices. Symbols missing from the market count as 0."""
        prices = market.prices()
        return sum((pos.quantity * prices.get(sym, 0.0) for sym, pos in self.holdings.items()), 0.0)

    def total_value(self, market: Market) -> float:
        """Cash plus holdings value."""
        return self.cash + self.value_portfolio(market)

    def buy(
        self,
        symbol: str,
        quantity: int,
        market: Market,
        *,
        timestamp: datetime | None = None,
    ) -> Trade:
        """
        Buy quantity shares of symbol at the current market price.

        Raises InvalidQuantityError, UnknownSymbolError or InsufficientFundsError.
        """
        quantity = _check_quantity(quantity)
        price = market.price(symbol)
        cost = price * quantity
        with self._lock:
            if self.cash < cost:
                raise InsufficientFundsError(required=cost, available=self.cash, symbol=symbol)
            old = self.holdings.get(symbol)
            if old is None:
                updated = Position(quantity=quantity, average_cost=price)
            else:
                new_qty = old.quantity + quantity
                updated = Position(
                    quantity=new_qty,
                    average_cost=(old.cost_total + price * quantity) / new_qty,
                )
            self.cash -= cost
            self.holdings[symbol] = updated
        logger.info("BUY %s %d @ %.2f (cost %.2f, cash %.2f)", symbol, quantity, price, cost, self.cash)
        return Trade(
            owner=self.owner,
            symbol=symbol,
            side=Side.BUY,
            quantity=quantity,
            price=price,
            timestamp=timestamp or datetime.now(),
        )

    def sell(
        self,
        symbol: str,
        quantity: int,
        market: Market,
        *,
        timestamp: datetime | None = None,
    ) -> tuple[Trade, float]:
        """
        Sell quantity shares of symbol at the current market price.

        Returns the trade and the realized profit (negative for a loss), which is
        (price - average_cost) * quantity. Selling the whole position removes it.
        Raises InvalidQuantityError, NotOwnedError, InsufficientSharesError or
        UnknownSymbolError (held symbol no longer listed).
        """
        quantity = _check_quantity(quantity)
        with self._lock:
            pos = self.holdings.get(symbol)
            if pos is None:
                raise NotOwnedError(symbol)
            if quantity > pos.quantity:
                raise InsufficientSharesError(symbol, requested=quantity, owned=pos.quantity)
            price = market.price(symbol)
            proceeds = price * quantity
            profit = (price - pos.average_cost) * quantity
            remaining = pos.quantity - quantity
            self.cash += proceeds
            if remaining == 0:
                del self.holdings[symbol]
            else:
                self.holdings[symbol] = replace(pos, quantity=remaining)
        logger.info("SELL %s %d @ %.2f (proceeds %.2f, pnl %.2f)", symbol, quantity, price, proceeds, profit)
        trade = Trade(
            owner=self.owner,
            symbol=symbol,
            side=Side.SELL,
            quantity=quantity,
            price=price,
            timestamp=timestamp or datetime.now(),
        )
        return trade, profit

    def holdings_frame(self, market: Market) -> pd.DataFrame:
        """
        One row per holding with its current valuation. Holdings whose symbol is
        no longer listed get a NaN price and zero market value.
        """
        prices = market.prices()
        rows = []
        for sym, pos in self.holdings.items():
            price = prices.get(sym)
            value = pos.quantity * price if price is not None else 0.0
            rows.append(
                {
                    "symbol": sym,
                    "quantity": pos.quantity,
                    "average_cost": pos.average_cost,
                    "price": price if price is not None else np.nan,
                    "market_value": value,
                    "unrealized_pnl": value - pos.cost_total if price is not None else np.nan,
                }
            )
        if not rows:
            return pd.DataFrame(columns=HOLDINGS_COLUMNS)
        return pd.DataFrame(rows, columns=HOLDINGS_COLUMNS)


def default_account(owner: str = DEFAULT_OWNER, cash: float = DEFAULT_STARTING_CASH) -> Account:
    """Fresh account with no holdings."""
    return Account(owner=owner, cash=cash, holdings={})
