"""
stocksim: single-user stock trading simulator core.

In-memory market with drifting prices, an account with average-cost
accounting, and load/save of the account between runs. No UI; drivers call
into TradingSession.
"""

__version__ = "0.1.0"

from stocksim.trade import Side, Trade
from stocksim.market import DEFAULT_CATALOG, Instrument, Market
from stocksim.portfolio import Account, Position, default_account
from stocksim.transaction_log import TransactionLog
from stocksim.scheduler import PriceDriftScheduler, SchedulerState
from stocksim.config import SimulatorConfig
from stocksim.session import CommandResult, PortfolioView, TradingSession

__all__ = [
    "Side",
    "Trade",
    "DEFAULT_CATALOG",
    "Instrument",
    "Market",
    "Account",
    "Position",
    "default_account",
    "TransactionLog",
    "PriceDriftScheduler",
    "SchedulerState",
    "SimulatorConfig",
    "CommandResult",
    "PortfolioView",
    "TradingSession",
]
