"""
Cross-Agent Trigger Dispatcher

Fire-and-forget execution of a downstream agent run on a background
thread pool. The originating runner gets a Future back immediately and
never waits on it. Downstream failures (exceptions or failed results) are
logged as DownstreamTriggerFailed and dropped.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_futures
from typing import Any, Callable, Optional, TYPE_CHECKING

from core.schemas.errors import DownstreamTriggerException
from core.schemas.types import AgentType, parse_agent_type

if TYPE_CHECKING:
    from .base import AgentResult

logger = logging.getLogger(__name__)

# Runs one agent by type; AgentService.run is the usual implementation
AgentRunnerFn = Callable[[AgentType, dict[str, Any]], "AgentResult"]
FailureHook = Callable[[DownstreamTriggerException], None]


class CrossAgentDispatcher:
    """
    Dispatch downstream agent runs without blocking the caller.

    Usage:
        dispatcher = CrossAgentDispatcher(service.run, max_workers=4)
        dispatcher.dispatch(AgentType.POST_HARVEST, {"region": "Kiambu", ...})
        ...
        dispatcher.shutdown()
    """

    def __init__(
        self,
        runner: AgentRunnerFn,
        *,
        max_workers: int = 4,
        on_failure: Optional[FailureHook] = None,
    ) -> None:
        """
        Args:
            runner: Callable that runs an agent by type
            max_workers: Size of the background thread pool
            on_failure: Called with each DownstreamTriggerException after logging
        """
        self._runner = runner
        self._on_failure = on_failure
        self._executor = ThreadPoolExecutor(
            max_workers=max(1, max_workers),
            thread_name_prefix="shamba-trigger",
        )
        self._lock = threading.Lock()
        self._futures: set[Future] = set()
        self._closed = False

    def dispatch(self, target: "AgentType | str", context_input: dict[str, Any]) -> Optional[Future]:
        """
        Submit a downstream run and return immediately.

        Never raises. Returns None if the trigger was dropped (dispatcher
        shut down or unknown target).
        """
        try:
            target = parse_agent_type(target)
        except ValueError:
            self._report(DownstreamTriggerException(f"Unknown trigger target {target!r}", target=str(target)))
            return None

        payload = dict(context_input)
        with self._lock:
            if self._closed:
                logger.warning("Dispatcher closed; dropping trigger for %s", target.value)
                return None
            try:
                future = self._executor.submit(self._run, target, payload)
            except RuntimeError as e:
                logger.warning("Dispatcher rejected trigger for %s: %s", target.value, e)
                return None
            self._futures.add(future)

        future.add_done_callback(self._discard)
        logger.info("Dispatched %s run (reason: %s)", target.value, payload.get("trigger_reason"))
        return future

    def _run(self, target: AgentType, context_input: dict[str, Any]) -> Optional["AgentResult"]:
        try:
            result = self._runner(target, context_input)
        except Exception as e:
            self._report(
                DownstreamTriggerException(
                    f"Downstream {target.value} run raised {type(e).__name__}: {e}",
                    target=target.value,
                ),
                exc_info=True,
            )
            return None

        if result is not None and not result.success:
            self._report(
                DownstreamTriggerException(
                    f"Downstream {target.value} run failed: {result.error}",
                    target=target.value,
                    details={"error_code": result.error_code},
                )
            )
        return result

    def _report(self, error: DownstreamTriggerException, exc_info: bool = False) -> None:
        logger.error("DownstreamTriggerFailed: %s", error.message, exc_info=exc_info)
        if self._on_failure is not None:
            try:
                self._on_failure(error)
            except Exception:
                logger.exception("on_failure hook raised")

    def _discard(self, future: Future) -> None:
        with self._lock:
            self._futures.discard(future)

    @property
    def pending(self) -> int:
        """Number of dispatched runs not yet finished."""
        with self._lock:
            return len(self._futures)

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """
        Block until every dispatched run has finished.

        Meant for tests and graceful shutdown, never for request paths.

        Returns:
            True if idle, False if the timeout expired first
        """
        with self._lock:
            snapshot = list(self._futures)
        if not snapshot:
            return True
        _, not_done = wait_futures(snapshot, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting triggers and release the worker threads."""
        with self._lock:
            self._closed = True
        self._executor.shutdown(wait=wait)


class NullDispatcher:
    """Dispatcher that drops every trigger (orchestration disabled)."""

    def dispatch(self, target: "AgentType | str", context_input: dict[str, Any]) -> None:
        logger.info("Cross-agent dispatch disabled; dropping trigger for %s", getattr(target, "value", target))
        return None

    @property
    def pending(self) -> int:
        return 0

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        return True

    def shutdown(self, wait: bool = True) -> None:
        pass
