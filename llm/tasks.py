"""Cancellable background execution of assistant requests.

Requests run on a small thread pool and are keyed by a request id. Results
are handed back on the caller's thread through :meth:`BackgroundTasks.collect`,
so the ledger is only ever mutated from one thread.
"""

import uuid
from concurrent.futures import (
    FIRST_COMPLETED,
    CancelledError,
    Future,
    ThreadPoolExecutor,
    wait,
)
from dataclasses import dataclass
from typing import Any, Callable, Collection, Dict, List, Optional

from logger import get_logger

logger = get_logger()


@dataclass
class TaskResult:
    """Outcome of a finished background request.

    Attributes:
        request_id: Id the request was submitted under.
        value: Return value of the task, None if it failed.
        error: The exception raised by the task, if any.
    """

    request_id: str
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class BackgroundTasks:
    """Runs callables in the background, one live request per request id.

    Submitting under an id that is still pending cancels the older request;
    its result is discarded even if it was already running.

    Args:
        max_workers: Size of the thread pool.
    """

    def __init__(self, max_workers: int = 2):
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="dindin-llm"
        )
        self._pending: Dict[str, Future] = {}

    def submit(
        self,
        fn: Callable[..., Any],
        *args: Any,
        request_id: Optional[str] = None,
        **kwargs: Any,
    ) -> str:
        """Schedule ``fn(*args, **kwargs)``.

        Returns:
            The request id (generated when not given).
        """
        request_id = request_id or uuid.uuid4().hex
        if request_id in self._pending:
            self.cancel(request_id)

        self._pending[request_id] = self._executor.submit(fn, *args, **kwargs)
        logger.debug(f"Submitted background request {request_id}")
        return request_id

    def cancel(self, request_id: str) -> bool:
        """Cancel a request; its result will never be collected.

        Returns:
            True if the request was pending.
        """
        future = self._pending.pop(request_id, None)
        if future is None:
            return False
        future.cancel()
        logger.debug(f"Cancelled background request {request_id}")
        return True

    def pending(self) -> List[str]:
        """Ids of requests that have not been collected yet."""
        return list(self._pending)

    def collect(
        self,
        timeout: Optional[float] = 0,
        request_ids: Optional[Collection[str]] = None,
    ) -> List[TaskResult]:
        """Take the results of finished requests.

        Args:
            timeout: Seconds to wait for at least one pending request to
                finish; 0 returns immediately, None waits for all of them.
            request_ids: Only collect these requests; others stay pending.

        Returns:
            Results of the requests that finished, in submission order.
        """
        if not self._pending:
            return []

        selected = {
            request_id: future
            for request_id, future in self._pending.items()
            if request_ids is None or request_id in request_ids
        }
        if not selected:
            return []

        futures = list(selected.values())
        if timeout is None:
            wait(futures)
        elif timeout > 0:
            wait(futures, timeout=timeout, return_when=FIRST_COMPLETED)

        results = []
        for request_id, future in selected.items():
            if not future.done():
                continue
            del self._pending[request_id]
            try:
                results.append(TaskResult(request_id, value=future.result()))
            except CancelledError:
                continue
            except Exception as e:
                logger.error(f"Background request {request_id} failed: {e}")
                results.append(TaskResult(request_id, error=e))
        return results

    def shutdown(self, block: bool = True) -> None:
        """Cancel everything still pending and stop the pool."""
        for request_id in list(self._pending):
            self.cancel(request_id)
        self._executor.shutdown(wait=block)
