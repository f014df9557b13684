#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PlanningLoop - fixed-rate driver for PathPlanningService.

Key design:
- One background thread runs run_cycle() at planning_rate Hz
- Cycles never overlap; a slow cycle simply delays the next one
- Exceptions inside a cycle are logged and the loop keeps going
"""

import threading
import time
from enum import Enum
from typing import Optional

from loguru import logger

from grid_nav.common.constants import THREAD_JOIN_TIMEOUT
from grid_nav.path_planner.map_model import PlanResult
from grid_nav.service.path_planning_service import PathPlanningService


class PlanningLoop:
    """Planning loop with start/stop lifecycle.

    Lifecycle:
        IDLE -> start() -> RUNNING
        RUNNING -> stop() -> IDLE
    """

    class State(Enum):
        IDLE = 0
        RUNNING = 1

    def __init__(self, service: PathPlanningService, rate_hz: Optional[float] = None,
                 max_cycles: Optional[int] = None):
        self.service_ = service
        self.rate_hz_ = rate_hz or service.cfg.planner.planning_rate
        if self.rate_hz_ <= 0:
            raise ValueError(f"rate_hz must be positive: {self.rate_hz_}")
        self.max_cycles_ = max_cycles

        self._state = PlanningLoop.State.IDLE
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._cycle_lock = threading.Lock()
        self.cycles_ = 0
        self.errors_ = 0

    @property
    def state(self) -> "PlanningLoop.State":
        return self._state

    @property
    def period(self) -> float:
        return 1.0 / self.rate_hz_

    def tick_once(self) -> Optional[PlanResult]:
        """Run exactly one planning cycle on the calling thread."""
        with self._cycle_lock:
            self.cycles_ += 1
            try:
                return self.service_.run_cycle()
            except Exception as e:
                self.errors_ += 1
                logger.exception(f"Planning cycle {self.cycles_} failed: {e}")
                return None

    def start(self) -> bool:
        """Start the background loop.

        Returns:
            True if the loop was started, False if it was already running.
        """
        if self._state == PlanningLoop.State.RUNNING:
            logger.warning("PlanningLoop already running")
            return False

        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="planning-loop", daemon=True)
        self._state = PlanningLoop.State.RUNNING
        self._thread.start()
        logger.info(f"PlanningLoop started at {self.rate_hz_:.2f} Hz")
        return True

    def stop(self) -> None:
        """Stop the loop and wait for the current cycle to finish."""
        self._stop_event.set()
        if self._thread is not None and self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=THREAD_JOIN_TIMEOUT)
        self._thread = None
        if self._state == PlanningLoop.State.RUNNING:
            logger.info(f"PlanningLoop stopped after {self.cycles_} cycles ({self.errors_} errors)")
        self._state = PlanningLoop.State.IDLE

    def join(self, timeout: Optional[float] = None) -> None:
        """Block until the loop thread exits (e.g. after max_cycles)."""
        if self._thread is not None:
            self._thread.join(timeout)

    def _run(self) -> None:
        while not self._stop_event.is_set():
            start_time = time.perf_counter()

            self.tick_once()
            if self.max_cycles_ is not None and self.cycles_ >= self.max_cycles_:
                break

            # Sleep the remainder of the period
            elapsed = time.perf_counter() - start_time
            sleep_time = self.period - elapsed
            if sleep_time > 0:
                self._stop_event.wait(sleep_time)
            else:
                logger.debug(f"Planning cycle overran its period by {-sleep_time * 1000:.1f}ms")

        self._state = PlanningLoop.State.IDLE
