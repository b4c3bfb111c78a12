"""Planner state machine, one controller per client.

Transitions::

    idle ──start_pipeline──▶ running ──complete_pipeline──▶ ready
      ▲                        │   └───fail_pipeline──────▶ error
      │                        └─(newer start supersedes the token)
      ├──────clear_state────── any
      └──begin_restore──▶ restoring ──restore──▶ ready

Every ``start_pipeline`` issues a fresh run token; completions carrying an
older token are dropped so a slow earlier submission can never overwrite a
newer one.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from routeweather.errors import RestoreFailed
from routeweather.models import CachedSession, RouteWeatherResult
from routeweather.pipeline import result_from_cache

logger = logging.getLogger(__name__)


class PlannerPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    RESTORING = "restoring"
    READY = "ready"
    ERROR = "error"


@dataclass
class PlannerState:
    """Snapshot of what the client should currently display."""

    phase: PlannerPhase = PlannerPhase.IDLE
    run_token: int = 0
    result: Optional[RouteWeatherResult] = None
    error: Optional[str] = None


class PlannerController:
    """Owns a PlannerState and serializes its transitions."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = PlannerState()

    @property
    def state(self) -> PlannerState:
        return self._state

    def _enter(self, phase: PlannerPhase) -> None:
        logger.debug("Planner %s -> %s", self._state.phase.value, phase.value)
        self._state.phase = phase

    def start_pipeline(self) -> int:
        """Begin a new run: clear displayed results and return its token."""
        with self._lock:
            self._state.run_token += 1
            self._state.result = None
            self._state.error = None
            self._enter(PlannerPhase.RUNNING)
            logger.debug("Pipeline run %d started", self._state.run_token)
            return self._state.run_token

    def complete_pipeline(self, token: int, result: RouteWeatherResult) -> bool:
        """Publish a run's result. Returns False if the run was superseded or cleared."""
        with self._lock:
            if token != self._state.run_token or self._state.phase != PlannerPhase.RUNNING:
                logger.warning(
                    "Discarding stale result from run %d (current %d)",
                    token, self._state.run_token,
                )
                return False
            self._state.result = result
            self._enter(PlannerPhase.READY)
            return True

    def fail_pipeline(self, token: int, message: str) -> bool:
        """Record a run's failure; nothing partial is kept."""
        with self._lock:
            if token != self._state.run_token or self._state.phase != PlannerPhase.RUNNING:
                return False
            self._state.result = None
            self._state.error = message
            self._enter(PlannerPhase.ERROR)
            return True

    def clear_state(self) -> None:
        """Drop any result or error and invalidate in-flight runs."""
        with self._lock:
            self._state.run_token += 1
            self._state.result = None
            self._state.error = None
            self._enter(PlannerPhase.IDLE)

    def begin_restore(self) -> bool:
        """Claim the restore slot; False if a run or another restore is in progress."""
        with self._lock:
            if self._state.phase in (PlannerPhase.RUNNING, PlannerPhase.RESTORING):
                logger.debug("Restore skipped, planner is %s", self._state.phase.value)
                return False
            self._enter(PlannerPhase.RESTORING)
            return True

    def restore(self, cached: CachedSession) -> RouteWeatherResult:
        """Rebuild and display a cached session. Call after ``begin_restore``.

        Raises:
            RestoreFailed: If the cached payload cannot be turned into a result;
                the planner is left idle.
        """
        try:
            result = result_from_cache(cached)
        except ValueError as exc:
            with self._lock:
                self._state.result = None
                self._enter(PlannerPhase.IDLE)
            raise RestoreFailed(f"Cached route is unusable: {exc}") from exc

        with self._lock:
            if self._state.phase != PlannerPhase.RESTORING:
                raise RestoreFailed("Restore was not started")
            self._state.result = result
            self._state.error = None
            self._enter(PlannerPhase.READY)
        return result

    def abort_restore(self) -> None:
        with self._lock:
            if self._state.phase == PlannerPhase.RESTORING:
                self._enter(PlannerPhase.IDLE)


class ControllerRegistry:
    """One PlannerController per client id, created on first use."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._controllers: dict[str, PlannerController] = {}

    def get(self, client_id: str) -> PlannerController:
        with self._lock:
            controller = self._controllers.get(client_id)
            if controller is None:
                controller = PlannerController()
                self._controllers[client_id] = controller
            return controller
