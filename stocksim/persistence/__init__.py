"""
Persistence layer: load and save the account between runs.

PersistenceGateway interface; JSON file gateway; in-memory gateway.
Gateways report outcomes as LoadResult / SaveResult instead of raising.
"""

from stocksim.persistence.codec import account_from_record, account_to_record
from stocksim.persistence.gateway import PersistenceGateway
from stocksim.persistence.json_file import JsonFileGateway
from stocksim.persistence.memory import InMemoryGateway
from stocksim.persistence.types import LoadResult, LoadStatusKind, SaveResult, SaveStatusKind

__all__ = [
    "PersistenceGateway",
    "JsonFileGateway",
    "InMemoryGateway",
    "LoadResult",
    "LoadStatusKind",
    "SaveResult",
    "SaveStatusKind",
    "account_from_record",
    "account_to_record",
]
