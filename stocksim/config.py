"""
Simulator configuration from environment variables.

STOCKSIM_PORTFOLIO_FILE   path of the saved portfolio (default portfolio.json)
STOCKSIM_OWNER            owner of a freshly created account (default Trader1)
STOCKSIM_STARTING_CASH    cash of a freshly created account (default 10000.00)
STOCKSIM_DRIFT_INTERVAL   seconds between drift passes (default 120)
STOCKSIM_VOLATILITY       drift volatility (default 0.05)
STOCKSIM_SEED             optional integer seed for the drift RNG
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from stocksim.market import DEFAULT_VOLATILITY
from stocksim.persistence.json_file import DEFAULT_PORTFOLIO_FILE
from stocksim.portfolio import DEFAULT_OWNER, DEFAULT_STARTING_CASH
from stocksim.scheduler import DEFAULT_INTERVAL_SECONDS

ENV_PREFIX = "STOCKSIM_"


def _float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(ENV_PREFIX + name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class SimulatorConfig:
    portfolio_file: str = DEFAULT_PORTFOLIO_FILE
    owner: str = DEFAULT_OWNER
    starting_cash: float = DEFAULT_STARTING_CASH
    drift_interval: float = DEFAULT_INTERVAL_SECONDS
    volatility: float = DEFAULT_VOLATILITY
    seed: int | None = None

    def __post_init__(self) -> None:
        if self.starting_cash < 0:
            raise ValueError(f"starting_cash must be >= 0, got {self.starting_cash}")
        if self.drift_interval <= 0:
            raise ValueError(f"drift_interval must be > 0, got {self.drift_interval}")
        if self.volatility < 0:
            raise ValueError(f"volatility must be >= 0, got {self.volatility}")

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "SimulatorConfig":
        """Build config from os.environ (or the given mapping). Unset variables use defaults."""
        env = os.environ if env is None else env
        seed_raw = env.get(ENV_PREFIX + "SEED", "").strip()
        seed: int | None = None
        if seed_raw:
            try:
                seed = int(seed_raw)
            except ValueError:
                raise ValueError(f"{ENV_PREFIX}SEED must be an integer, got {seed_raw!r}") from None
        return cls(
            portfolio_file=env.get(ENV_PREFIX + "PORTFOLIO_FILE", "").strip() or DEFAULT_PORTFOLIO_FILE,
            owner=env.get(ENV_PREFIX + "OWNER", "").strip() or DEFAULT_OWNER,
            starting_cash=_float(env, "STARTING_CASH", DEFAULT_STARTING_CASH),
            drift_interval=_float(env, "DRIFT_INTERVAL", DEFAULT_INTERVAL_SECONDS),
            volatility=_float(env, "VOLATILITY", DEFAULT_VOLATILITY),
            seed=seed,
        )
