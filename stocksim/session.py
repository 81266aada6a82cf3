"""
Trading session: the command surface of the simulator.

Owns one market, one account, the transaction log, the drift scheduler and
the persistence gateway. No module-level state, so independent sessions can
coexist. Flow for a trade: validate → account buy/sell → transaction log →
observers. Trading errors stop at this boundary and come back as a rejected
CommandResult; the account and market are left unchanged.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Protocol

import numpy as np
import pandas as pd

from stocksim.config import SimulatorConfig
from stocksim.errors import TradingError
from stocksim.market import Market
from stocksim.persistence import InMemoryGateway, JsonFileGateway, LoadResult, LoadStatusKind, PersistenceGateway, SaveResult
from stocksim.portfolio import Account, default_account
from stocksim.scheduler import PriceDriftScheduler
from stocksim.trade import Trade
from stocksim.transaction_log import TransactionLog

logger = logging.getLogger(__name__)


class TradeObserver(Protocol):
    """Post-trade callback."""

    def __call__(self, trade: Trade, account: Account) -> None:
        ...


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a buy or sell command. Immutable."""

    ok: bool
    message: str
    trade: Trade | None = None
    profit: float | None = None
    error: TradingError | None = None


@dataclass
class RejectedCommandLog:
    """One entry for a rejected buy or sell."""

    command: str
    symbol: str
    quantity: int
    reason: str
    timestamp: datetime


@dataclass(frozen=True)
class PortfolioView:
    """Account valuation at one consistent set of market prices."""

    owner: str
    cash: float
    holdings_value: float
    total_value: float
    holdings: pd.DataFrame = field(repr=False)


class TradingSession:
    """
    One user's trading session.

    Use TradingSession.open() to build a session from config and stored state,
    or construct directly with an explicit market and account.
    """

    def __init__(
        self,
        market: Market,
        account: Account,
        gateway: PersistenceGateway | None = None,
        *,
        config: SimulatorConfig | None = None,
        rng: np.random.Generator | None = None,
        observers: Sequence[TradeObserver] = (),
    ) -> None:
        self.config = config or SimulatorConfig()
        self.market = market
        self.account = account
        self.gateway: PersistenceGateway = gateway if gateway is not None else InMemoryGateway()
        self.transaction_log = TransactionLog()
        if rng is None:
            rng = np.random.default_rng(self.config.seed)
        self.scheduler = PriceDriftScheduler(market, rng)
        self.observers: list[TradeObserver] = list(observers)
        self.load_result: LoadResult | None = None
        self.warnings: list[str] = []
        self._rejected_log: list[RejectedCommandLog] = []
        self._save_result: SaveResult | None = None

    @classmethod
    def open(
        cls,
        config: SimulatorConfig | None = None,
        *,
        gateway: PersistenceGateway | None = None,
        market: Market | None = None,
        rng: np.random.Generator | None = None,
        observers: Sequence[TradeObserver] = (),
    ) -> "TradingSession":
        """
        Build a session: seed the market, load the account.

        ABSENT storage gives a default account silently. CORRUPT or UNAVAILABLE
        storage also gives a default account, with the failure recorded in
        session.warnings.
        """
        config = config or SimulatorConfig.from_env()
        gateway = gateway if gateway is not None else JsonFileGateway(config.portfolio_file)
        market = market if market is not None else Market.default()

        result = gateway.load()
        warnings: list[str] = []
        if result.status == LoadStatusKind.LOADED and result.account is not None:
            account = result.account
        else:
            account = default_account(config.owner, config.starting_cash)
            if result.status == LoadStatusKind.ABSENT:
                logger.info("No existing portfolio found; created a new one for %s", account.owner)
            else:
                warning = f"Could not load saved portfolio ({result.status.value}): {result.message}. Starting fresh."
                logger.warning("%s", warning)
                warnings.append(warning)

        session = cls(market, account, gateway, config=config, rng=rng, observers=observers)
        session.load_result = result
        session.warnings.extend(warnings)
        return session

    # --- Market ---

    def start_market(self, interval: float | None = None, volatility: float | None = None) -> None:
        """Start background price drift (config defaults when not given)."""
        self.scheduler.start(
            interval=interval if interval is not None else self.config.drift_interval,
            volatility=volatility if volatility is not None else self.config.volatility,
        )

    def view_market(self) -> pd.DataFrame:
        """Current market: symbol, name, price."""
        return self.market.snapshot()

    # --- Portfolio ---

    def view_portfolio(self) -> PortfolioView:
        with self.market.locked():
            holdings = self.account.holdings_frame(self.market)
            holdings_value = self.account.value_portfolio(self.market)
        return PortfolioView(
            owner=self.account.owner,
            cash=self.account.cash,
            holdings_value=holdings_value,
            total_value=self.account.cash + holdings_value,
            holdings=holdings,
        )

    def tradeable_symbols(self) -> list[str]:
        """Held symbols that can be sold (listed in the market)."""
        return self.account.tradeable_symbols(self.market)

    # --- Trading ---

    def buy(self, symbol: str, quantity: int) -> CommandResult:
        try:
            trade = self.account.buy(symbol, quantity, self.market)
        except TradingError as e:
            return self._reject("buy", symbol, quantity, e)
        self._record(trade)
        return CommandResult(
            ok=True,
            message=f"Bought {trade.quantity} shares of {symbol} for ${trade.notional:.2f}.",
            trade=trade,
        )

    def sell(self, symbol: str, quantity: int) -> CommandResult:
        try:
            trade, profit = self.account.sell(symbol, quantity, self.market)
        except TradingError as e:
            return self._reject("sell", symbol, quantity, e)
        self._record(trade)
        return CommandResult(
            ok=True,
            message=f"Sold {trade.quantity} shares of {symbol} for ${trade.notional:.2f}.",
            trade=trade,
            profit=profit,
        )

    def _record(self, trade: Trade) -> None:
        self.transaction_log.append(trade)
        for obs in self.observers:
            obs(trade, self.account)

    def _reject(self, command: str, symbol: str, quantity: int, error: TradingError) -> CommandResult:
        self._rejected_log.append(
            RejectedCommandLog(
                command=command,
                symbol=symbol,
                quantity=quantity,
                reason=type(error).__name__,
                timestamp=datetime.now(),
            )
        )
        logger.warning("%s rejected: %s", command.capitalize(), error)
        return CommandResult(ok=False, message=str(error), error=error)

    def get_rejected_log(self) -> list[RejectedCommandLog]:
        """Rejected commands in order (for debugging and reporting)."""
        return list(self._rejected_log)

    # --- Shutdown ---

    @property
    def closed(self) -> bool:
        return self._save_result is not None

    def exit(self) -> SaveResult:
        """
        Stop price drift and save the account once. A failed save is reported
        in the result, never raised. Calling exit() again returns the first result.
        """
        if self._save_result is not None:
            return self._save_result
        self.scheduler.stop()
        result = self.gateway.save(self.account)
        if result.ok:
            logger.info("Session closed for %s", self.account.owner)
        else:
            logger.warning("Session closed without saving: %s", result.message)
        self._save_result = result
        return result
