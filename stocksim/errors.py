"""
Exception hierarchy for the simulator.

Trading errors are raised before any state is touched, so a failed buy or sell
leaves the account and the market unchanged. The session catches them at the
command boundary.
"""


class SimulatorError(Exception):
    """Base exception for all simulator errors."""

    pass


class TradingError(SimulatorError):
    """Raised when a buy or sell command is not legal."""

    pass


class InvalidQuantityError(TradingError):
    """Raised when a trade quantity is not a positive integer."""

    def __init__(self, quantity: object):
        self.quantity = quantity
        super().__init__(f"Quantity must be a positive integer, got {quantity!r}")


class UnknownSymbolError(TradingError):
    """Raised when a symbol is not listed in the market."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"Unknown symbol: {symbol}")


class NotOwnedError(TradingError):
    """Raised when selling a symbol that is not held."""

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(f"No position held in {symbol}")


class InsufficientFundsError(TradingError):
    """Raised when cash does not cover the cost of a buy."""

    def __init__(self, required: float, available: float, symbol: str = ""):
        self.required = required
        self.available = available
        self.symbol = symbol
        super().__init__(
            f"Insufficient funds for {symbol or 'buy'}: required={required:.2f}, available={available:.2f}"
        )


class InsufficientSharesError(TradingError):
    """Raised when selling more shares than are held."""

    def __init__(self, symbol: str, requested: int, owned: int):
        self.symbol = symbol
        self.requested = requested
        self.owned = owned
        super().__init__(f"Cannot sell {requested} {symbol}: only {owned} held")


class SchedulerStateError(SimulatorError):
    """Raised on an illegal scheduler transition (e.g. starting twice)."""

    pass


class PersistenceError(SimulatorError):
    """Base class for persistence failures."""

    pass


class PersistenceCorruptError(PersistenceError):
    """Raised when stored account data cannot be decoded."""

    pass


class PersistenceWriteError(PersistenceError):
    """Raised when account data cannot be written."""

    pass
