"""
Persistence gateway abstraction.

PersistenceGateway ABC: load, save. The file gateway and the in-memory gateway
implement it; the session depends only on this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stocksim.persistence.types import LoadResult, SaveResult
from stocksim.portfolio import Account


class PersistenceGateway(ABC):
    """
    Durable storage for one account. Implementations must not raise for
    expected storage conditions; they return a status object instead.
    """

    @abstractmethod
    def load(self) -> LoadResult:
        """
        Load the stored account.
        LOADED with the account; ABSENT when nothing was ever saved;
        CORRUPT when stored data cannot be decoded; UNAVAILABLE when storage
        cannot be read at all.
        """
        ...

    @abstractmethod
    def save(self, account: Account) -> SaveResult:
        """Store the account. OK, or WRITE_FAILED with a message."""
        ...
