"""
In-memory gateway: keeps the last saved record in memory.

Used for sessions without durable storage and in tests. Stores the encoded
record rather than the Account object, so load() returns an independent copy.
"""

from __future__ import annotations

from typing import Any

from stocksim.errors import PersistenceCorruptError
from stocksim.persistence.codec import account_from_record, account_to_record
from stocksim.persistence.gateway import PersistenceGateway
from stocksim.persistence.types import LoadResult, LoadStatusKind, SaveResult, SaveStatusKind
from stocksim.portfolio import Account


class InMemoryGateway(PersistenceGateway):
    """Optionally pre-seeded with a record (e.g. to simulate corrupt storage)."""

    def __init__(self, record: Any = None, *, fail_writes: bool = False) -> None:
        self.record = record
        self.fail_writes = fail_writes
        self.save_count = 0

    def load(self) -> LoadResult:
        if self.record is None:
            return LoadResult(status=LoadStatusKind.ABSENT, message="No saved portfolio in memory")
        try:
            account = account_from_record(self.record)
        except PersistenceCorruptError as e:
            return LoadResult(status=LoadStatusKind.CORRUPT, message=f"Saved portfolio is malformed: {e}")
        return LoadResult(status=LoadStatusKind.LOADED, account=account)

    def save(self, account: Account) -> SaveResult:
        if self.fail_writes:
            return SaveResult(status=SaveStatusKind.WRITE_FAILED, message="Writes disabled for this gateway")
        self.record = account_to_record(account)
        self.save_count += 1
        return SaveResult(status=SaveStatusKind.OK, message="Portfolio saved in memory")
