"""
Price drift scheduler: background thread that applies Market.drift_prices
at a fixed period.

State machine: IDLE -> RUNNING -> STOPPED (terminal). The first pass fires as
soon as the scheduler starts, then once per interval. stop() waits for a pass
already in flight and guarantees no new pass begins afterwards.
"""

from __future__ import annotations

import logging
import threading
import time
from enum import Enum

import numpy as np

from stocksim.errors import SchedulerStateError
from stocksim.market import DEFAULT_VOLATILITY, Market

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 120.0


def fixed_rate_delay(started_at: float, interval: float, slot: int, now: float) -> float:
    """
    Seconds to wait before the pass scheduled at started_at + slot * interval.
    Zero when that time has already passed, so a slow pass shortens the next
    wait instead of pushing the whole schedule back.
    """
    return max(0.0, started_at + slot * interval - now)


class SchedulerState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class PriceDriftScheduler:
    """
    Runs drift passes over one market on a daemon thread.

    The rng is owned by the scheduler; pass a seeded generator for
    reproducible price paths.
    """

    def __init__(self, market: Market, rng: np.random.Generator | None = None) -> None:
        self.market = market
        self.rng = rng if rng is not None else np.random.default_rng()
        self._state = SchedulerState.IDLE
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._interval = DEFAULT_INTERVAL_SECONDS
        self._volatility = DEFAULT_VOLATILITY
        self._passes = 0

    @property
    def state(self) -> SchedulerState:
        return self._state

    @property
    def passes(self) -> int:
        """Number of completed drift passes."""
        return self._passes

    def start(self, interval: float = DEFAULT_INTERVAL_SECONDS, volatility: float = DEFAULT_VOLATILITY) -> None:
        """Begin drifting prices every interval seconds. Only valid from IDLE."""
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        if volatility < 0:
            raise ValueError(f"volatility must be >= 0, got {volatility}")
        with self._lock:
            if self._state is not SchedulerState.IDLE:
                raise SchedulerStateError(f"Cannot start scheduler in state {self._state.value}")
            self._interval = interval
            self._volatility = volatility
            self._state = SchedulerState.RUNNING
            self._thread = threading.Thread(target=self._run, name="PriceDriftScheduler", daemon=True)
            self._thread.start()
        logger.info("Price drift scheduler started (interval=%ss, volatility=%s)", interval, volatility)

    def stop(self, timeout: float | None = 5.0) -> None:
        """
        Stop the scheduler. Idempotent; stopping an IDLE scheduler moves it
        straight to STOPPED so it can never start.
        """
        with self._lock:
            if self._state is SchedulerState.STOPPED:
                return
            self._state = SchedulerState.STOPPED
            self._stop_event.set()
            thread = self._thread
            self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)
        logger.info("Price drift scheduler stopped after %d passes", self._passes)

    def _fire(self) -> bool:
        """Run one drift pass if still RUNNING. Returns False once stopped."""
        with self._lock:
            if self._state is not SchedulerState.RUNNING:
                return False
            try:
                self.market.drift_prices(self._volatility, self.rng)
            except Exception:  # noqa: BLE001
                logger.exception("Drift pass failed; prices left unchanged")
            else:
                self._passes += 1
            return True

    def _run(self) -> None:
        started_at = time.monotonic()
        slot = 0
        while self._fire():
            slot += 1
            delay = fixed_rate_delay(started_at, self._interval, slot, time.monotonic())
            if self._stop_event.wait(delay):
                break

    def __enter__(self) -> "PriceDriftScheduler":
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()
