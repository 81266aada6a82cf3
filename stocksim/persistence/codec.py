"""
Account record codec: Account <-> plain dict (JSON-compatible).

Record layout:
    {"format": "stocksim.account", "version": 1, "owner": str, "cash": float,
     "holdings": [{"symbol": str, "quantity": int, "averageCost": float}, ...]}
"""

from __future__ import annotations

import math
from typing import Any

from stocksim.errors import PersistenceCorruptError
from stocksim.portfolio import Account, Position

RECORD_FORMAT = "stocksim.account"
RECORD_VERSION = 1


def account_to_record(account: Account) -> dict[str, Any]:
    """Serialize an account. Holdings keep their insertion order."""
    return {
        "format": RECORD_FORMAT,
        "version": RECORD_VERSION,
        "owner": account.owner,
        "cash": float(account.cash),
        "holdings": [
            {"symbol": sym, "quantity": int(pos.quantity), "averageCost": float(pos.average_cost)}
            for sym, pos in account.holdings.items()
        ],
    }


def _number(value: Any, field_name: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PersistenceCorruptError(f"{field_name} must be a number, got {type(value).__name__}")
    try:
        number = float(value)
    except OverflowError:
        raise PersistenceCorruptError(f"{field_name} is out of range") from None
    if not math.isfinite(number):
        raise PersistenceCorruptError(f"{field_name} must be finite, got {number!r}")
    return number


def account_from_record(record: Any) -> Account:
    """Decode a record. Raises PersistenceCorruptError on any malformed field."""
    if not isinstance(record, dict):
        raise PersistenceCorruptError("record must be an object")
    if record.get("format") != RECORD_FORMAT:
        raise PersistenceCorruptError(f"unexpected format tag: {record.get('format')!r}")
    if record.get("version") != RECORD_VERSION:
        raise PersistenceCorruptError(f"unsupported version: {record.get('version')!r}")

    owner = record.get("owner")
    if not isinstance(owner, str) or not owner:
        raise PersistenceCorruptError("owner must be a non-empty string")
    cash = _number(record.get("cash"), "cash")
    if cash < 0:
        raise PersistenceCorruptError(f"cash must be >= 0, got {cash}")

    raw_holdings = record.get("holdings")
    if not isinstance(raw_holdings, list):
        raise PersistenceCorruptError("holdings must be a list")
    holdings: dict[str, Position] = {}
    for i, entry in enumerate(raw_holdings):
        if not isinstance(entry, dict):
            raise PersistenceCorruptError(f"holdings[{i}] must be an object")
        symbol = entry.get("symbol")
        if not isinstance(symbol, str) or not symbol:
            raise PersistenceCorruptError(f"holdings[{i}].symbol must be a non-empty string")
        if symbol in holdings:
            raise PersistenceCorruptError(f"duplicate holding: {symbol}")
        quantity = entry.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise PersistenceCorruptError(f"holdings[{i}].quantity must be a positive integer, got {quantity!r}")
        average_cost = _number(entry.get("averageCost"), f"holdings[{i}].averageCost")
        if average_cost < 0:
            raise PersistenceCorruptError(f"holdings[{i}].averageCost must be >= 0, got {average_cost}")
        holdings[symbol] = Position(quantity=quantity, average_cost=average_cost)

    return Account(owner=owner, cash=cash, holdings=holdings)
