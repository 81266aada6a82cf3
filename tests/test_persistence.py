"""
Tests for persistence: record codec, JsonFileGateway, InMemoryGateway.
"""

import json

import pytest

from stocksim import Account, Position, SimulatorConfig, TradingSession
from stocksim.errors import PersistenceCorruptError
from stocksim.persistence import (
    InMemoryGateway,
    JsonFileGateway,
    LoadStatusKind,
    SaveStatusKind,
    account_from_record,
    account_to_record,
)


def _account() -> Account:
    return Account(
        owner="Trader1",
        cash=0.1 + 0.2,
        holdings={
            "AAPL": Position(quantity=15, average_cost=(175 * 10 + 185 * 5) / 15),
            "TSLA": Position(quantity=1, average_cost=220.0),
        },
    )


# --- Codec ---


def test_record_layout():
    record = account_to_record(_account())
    assert record["format"] == "stocksim.account"
    assert record["version"] == 1
    assert record["owner"] == "Trader1"
    assert record["holdings"][0] == {"symbol": "AAPL", "quantity": 15, "averageCost": pytest.approx(178.3333333)}


def test_record_round_trip_is_exact():
    acct = _account()
    restored = account_from_record(json.loads(json.dumps(account_to_record(acct))))
    assert restored.owner == acct.owner
    assert restored.cash == acct.cash
    assert restored.holdings == acct.holdings


def _valid_record() -> dict:
    return account_to_record(_account())


@pytest.mark.parametrize(
    "mutate",
    [
        lambda r: r.update(format="other"),
        lambda r: r.update(version=2),
        lambda r: r.update(owner=""),
        lambda r: r.update(cash="100"),
        lambda r: r.update(cash=-1.0),
        lambda r: r.update(cash=float("nan")),
        lambda r: r.update(holdings={}),
        lambda r: r["holdings"][0].update(quantity=0),
        lambda r: r["holdings"][0].update(quantity=1.5),
        lambda r: r["holdings"][0].update(quantity=True),
        lambda r: r["holdings"][0].update(averageCost=-3.0),
        lambda r: r["holdings"][0].pop("symbol"),
        lambda r: r["holdings"].append(dict(r["holdings"][0])),
        lambda r: r["holdings"].append("AAPL"),
    ],
)
def test_malformed_records_are_corrupt(mutate):
    record = _valid_record()
    mutate(record)
    with pytest.raises(PersistenceCorruptError):
        account_from_record(record)


def test_non_object_record_is_corrupt():
    with pytest.raises(PersistenceCorruptError):
        account_from_record([1, 2, 3])


# --- JsonFileGateway ---


def test_json_load_absent(tmp_path):
    result = JsonFileGateway(tmp_path / "portfolio.json").load()
    assert result.status == LoadStatusKind.ABSENT
    assert result.account is None
    assert not result.is_error


def test_json_save_then_load(tmp_path):
    gateway = JsonFileGateway(tmp_path / "portfolio.json")
    acct = _account()
    saved = gateway.save(acct)
    assert saved.ok
    assert saved.status == SaveStatusKind.OK

    result = gateway.load()
    assert result.status == LoadStatusKind.LOADED
    assert result.account.cash == acct.cash
    assert result.account.holdings == acct.holdings
    assert list(tmp_path.iterdir()) == [tmp_path / "portfolio.json"]


def test_json_save_overwrites(tmp_path):
    gateway = JsonFileGateway(tmp_path / "portfolio.json")
    gateway.save(_account())
    gateway.save(Account(owner="Trader1", cash=5.0))
    result = gateway.load()
    assert result.account.cash == 5.0
    assert result.account.holdings == {}


def test_json_load_invalid_json_is_corrupt(tmp_path):
    path = tmp_path / "portfolio.json"
    path.write_text("{not json", encoding="utf-8")
    result = JsonFileGateway(path).load()
    assert result.status == LoadStatusKind.CORRUPT
    assert result.is_error
    assert result.account is None
    assert "not valid JSON" in result.message


def test_json_load_binary_garbage_is_corrupt(tmp_path):
    path = tmp_path / "portfolio.json"
    path.write_bytes(b"\xac\xed\x00\x05sr\x00")
    assert JsonFileGateway(path).load().status == LoadStatusKind.CORRUPT


def test_json_load_malformed_record_is_corrupt(tmp_path):
    path = tmp_path / "portfolio.json"
    record = _valid_record()
    record["holdings"][0]["quantity"] = -2
    path.write_text(json.dumps(record), encoding="utf-8")
    assert JsonFileGateway(path).load().status == LoadStatusKind.CORRUPT


def test_json_load_directory_is_unavailable(tmp_path):
    result = JsonFileGateway(tmp_path).load()
    assert result.status == LoadStatusKind.UNAVAILABLE
    assert result.is_error


def test_json_save_into_missing_directory_fails(tmp_path):
    gateway = JsonFileGateway(tmp_path / "missing" / "portfolio.json")
    result = gateway.save(_account())
    assert not result.ok
    assert result.status == SaveStatusKind.WRITE_FAILED
    assert "Cannot write" in result.message


# --- InMemoryGateway ---


def test_memory_gateway_round_trip_returns_copy():
    gateway = InMemoryGateway()
    assert gateway.load().status == LoadStatusKind.ABSENT
    acct = _account()
    assert gateway.save(acct).ok
    loaded = gateway.load().account
    assert loaded is not acct
    assert loaded.holdings == acct.holdings
    assert gateway.save_count == 1


def test_memory_gateway_corrupt_and_failing():
    assert InMemoryGateway(record={"format": "nope"}).load().status == LoadStatusKind.CORRUPT
    result = InMemoryGateway(fail_writes=True).save(_account())
    assert result.status == SaveStatusKind.WRITE_FAILED


# --- Oversized and deeply nested files ---


def _write_record(path, **overrides):
    record = _valid_record()
    record.update(overrides)
    path.write_text(json.dumps(record), encoding="utf-8")


def test_huge_integer_cash_is_corrupt(tmp_path):
    path = tmp_path / "portfolio.json"
    _write_record(path, cash=10**400)
    result = JsonFileGateway(path).load()
    assert result.status == LoadStatusKind.CORRUPT
    assert "out of range" in result.message


def test_huge_integer_average_cost_is_corrupt():
    record = _valid_record()
    record["holdings"][0]["averageCost"] = 10**400
    with pytest.raises(PersistenceCorruptError):
        account_from_record(record)


def test_deeply_nested_json_is_corrupt(tmp_path):
    path = tmp_path / "portfolio.json"
    path.write_text("[" * 200_000 + "]" * 200_000, encoding="utf-8")
    assert JsonFileGateway(path).load().status == LoadStatusKind.CORRUPT


def test_overlong_integer_literal_is_corrupt(tmp_path):
    path = tmp_path / "portfolio.json"
    text = json.dumps(_valid_record()).replace('"version": 1', '"version": ' + "9" * 5000)
    path.write_text(text, encoding="utf-8")
    assert JsonFileGateway(path).load().status == LoadStatusKind.CORRUPT


def test_session_opens_on_default_account_after_corrupt_file(tmp_path):
    path = tmp_path / "portfolio.json"
    _write_record(path, cash=10**400)
    session = TradingSession.open(SimulatorConfig(portfolio_file=str(path)))
    assert session.load_result.status == LoadStatusKind.CORRUPT
    assert session.account.cash == 10_000.0
    assert session.warnings
