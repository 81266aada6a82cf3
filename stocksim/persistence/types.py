"""
Persistence result types: outcome of a load or save.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from stocksim.portfolio import Account


class LoadStatusKind(Enum):
    """Outcome of PersistenceGateway.load()."""

    LOADED = "loaded"
    ABSENT = "absent"
    CORRUPT = "corrupt"
    UNAVAILABLE = "unavailable"


class SaveStatusKind(Enum):
    """Outcome of PersistenceGateway.save()."""

    OK = "ok"
    WRITE_FAILED = "write_failed"


@dataclass(frozen=True)
class LoadResult:
    """Result of loading stored state. account is set only when LOADED."""

    status: LoadStatusKind
    account: Account | None = None
    message: str | None = None

    @property
    def is_error(self) -> bool:
        """ABSENT is informational; CORRUPT and UNAVAILABLE are errors."""
        return self.status in (LoadStatusKind.CORRUPT, LoadStatusKind.UNAVAILABLE)


@dataclass(frozen=True)
class SaveResult:
    """Result of saving state. Immutable."""

    status: SaveStatusKind
    message: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is SaveStatusKind.OK
