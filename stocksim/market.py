"""
Market: in-memory catalog of tradable instruments and their current prices.

The instrument map is the one resource shared between the foreground command
loop and the background drift scheduler. Every read and every drift pass holds
the same lock, so a reader sees either the market before a pass or after it,
never a mix.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace

import numpy as np
import pandas as pd

from stocksim.errors import UnknownSymbolError

logger = logging.getLogger(__name__)

PRICE_FLOOR = 0.1
DEFAULT_VOLATILITY = 0.05


@dataclass(frozen=True)
class Instrument:
    """A tradable symbol with a display name and current price."""

    symbol: str
    name: str
    price: float

    def __post_init__(self) -> None:
        if self.price <= 0:
            raise ValueError(f"Instrument price must be positive: {self.symbol}={self.price}")


DEFAULT_CATALOG: tuple[Instrument, ...] = (
    Instrument("AAPL", "Apple Inc.", 175.00),
    Instrument("GOOG", "Alphabet Inc.", 145.00),
    Instrument("MSFT", "Microsoft Corp.", 295.00),
    Instrument("AMZN", "Amazon.com Inc.", 135.00),
    Instrument("TSLA", "Tesla, Inc.", 220.00),
)


class Market:
    """
    Symbol -> Instrument mapping. Instruments are immutable snapshots; a drift
    pass swaps in a whole new mapping under the lock.
    """

    def __init__(self, instruments: Iterable[Instrument] = ()) -> None:
        self._lock = threading.RLock()
        self._instruments: dict[str, Instrument] = {}
        if instruments:
            self.initialize(instruments)

    @classmethod
    def default(cls) -> "Market":
        """Market seeded with the built-in five-stock catalog."""
        return cls(DEFAULT_CATALOG)

    def initialize(self, instruments: Iterable[Instrument]) -> None:
        """Populate the market. Replaces any existing instruments."""
        seeded: dict[str, Instrument] = {}
        for inst in instruments:
            if inst.symbol in seeded:
                raise ValueError(f"Duplicate symbol in catalog: {inst.symbol}")
            seeded[inst.symbol] = inst
        with self._lock:
            self._instruments = seeded
        logger.info("Market initialized with %d instruments", len(seeded))

    @contextmanager
    def locked(self) -> Iterator["Market"]:
        """Hold the market lock across several reads (no drift pass in between)."""
        with self._lock:
            yield self

    def lookup(self, symbol: str) -> Instrument:
        """Return the instrument for symbol. Raises UnknownSymbolError if not listed."""
        with self._lock:
            inst = self._instruments.get(symbol)
        if inst is None:
            raise UnknownSymbolError(symbol)
        return inst

    def get(self, symbol: str) -> Instrument | None:
        """Instrument for symbol, or None if not listed."""
        with self._lock:
            return self._instruments.get(symbol)

    def price(self, symbol: str) -> float:
        """Current price of symbol. Raises UnknownSymbolError if not listed."""
        return self.lookup(symbol).price

    def prices(self) -> dict[str, float]:
        """Consistent snapshot of all current prices."""
        with self._lock:
            return {sym: inst.price for sym, inst in self._instruments.items()}

    def symbols(self) -> list[str]:
        with self._lock:
            return list(self._instruments)

    def __contains__(self, symbol: object) -> bool:
        with self._lock:
            return symbol in self._instruments

    def __len__(self) -> int:
        with self._lock:
            return len(self._instruments)

    def drift_prices(self, volatility: float, rng: np.random.Generator) -> None:
        """
        Nudge every price by a bounded random percentage.

        For each instrument (in catalog order) draws u in [-0.5, 0.5) and sets
        price = max(PRICE_FLOOR, price + u * price * volatility). The whole pass
        runs under the market lock. Deterministic for a given rng stream.
        """
        if volatility < 0:
            raise ValueError(f"volatility must be >= 0, got {volatility}")
        with self._lock:
            drifted: dict[str, Instrument] = {}
            for sym, inst in self._instruments.items():
                change = rng.uniform(-0.5, 0.5) * inst.price * volatility
                new_price = max(PRICE_FLOOR, inst.price + change)
                drifted[sym] = replace(inst, price=float(new_price))
            self._instruments = drifted
        logger.debug("Drift pass applied to %d instruments (volatility=%s)", len(drifted), volatility)

    def snapshot(self) -> pd.DataFrame:
        """One row per instrument: symbol, name, price (catalog order)."""
        with self._lock:
            rows = [
                {"symbol": inst.symbol, "name": inst.name, "price": inst.price}
                for inst in self._instruments.values()
            ]
        if not rows:
            return pd.DataFrame(columns=["symbol", "name", "price"])
        return pd.DataFrame(rows)
