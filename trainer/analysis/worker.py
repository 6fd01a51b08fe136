"""Analysis worker: runs analysis requests off the caller's thread."""

import itertools
import logging
import threading
import time
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from dataclasses import replace

from trainer.analysis.compute import AnalysisRequest, AnalysisResult, compute_analysis
from trainer.errors import AnalysisCancelledError

logger = logging.getLogger(__name__)

_request_counter = itertools.count(1)


def generate_request_id() -> str:
    """Return a unique id of the form ``analysis-<epoch ms>-<n>``."""
    return f"analysis-{int(time.time() * 1000)}-{next(_request_counter)}"


def run_analysis(request: AnalysisRequest) -> AnalysisResult:
    """Compute one request and time it. Safe to run in a worker process."""
    start = time.perf_counter()
    data = compute_analysis(request)
    return AnalysisResult(
        id=request.id,
        type=request.type,
        mode=request.mode,
        data=data,
        compute_time_ms=(time.perf_counter() - start) * 1000,
    )


class AnalysisWorker:
    """
    Handle over an executor for analysis requests.

    Each ``analyze`` call returns a Future keyed by a generated id. A
    pending request can be cancelled by id, and ``terminate`` rejects every
    pending request and shuts the executor down. Requests and results are
    immutable; nothing is shared with the session engine.
    """

    def __init__(self, executor: Executor | None = None, max_workers: int = 1) -> None:
        """
        Initialize the worker.

        Args:
            executor: Executor to run on; a thread pool is created if None
            max_workers: Size of the created thread pool
        """
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="analysis"
        )
        self._pending: dict[str, tuple[Future, Future]] = {}
        self._lock = threading.Lock()
        self._terminated = False

    @property
    def pending_ids(self) -> list[str]:
        """Return the ids of requests still waiting for a result."""
        with self._lock:
            return list(self._pending)

    def analyze(self, request: AnalysisRequest) -> Future:
        """
        Submit a request.

        Args:
            request: The request; any id it carries is replaced

        Returns:
            Future resolving to an AnalysisResult, or failing with
            AnalysisCancelledError or the computation's exception. The
            generated id is available as ``future.request_id``.
        """
        if self._terminated:
            raise AnalysisCancelledError("Analysis worker has been terminated")

        request_id = generate_request_id()
        request = replace(request, id=request_id)
        outer: Future = Future()
        outer.request_id = request_id  # type: ignore[attr-defined]

        with self._lock:
            inner = self._executor.submit(run_analysis, request)
            self._pending[request_id] = (outer, inner)
        inner.add_done_callback(lambda f: self._settle(request_id, f))

        logger.debug("Analysis %s submitted (%s/%s)", request_id, request.type.value, request.mode.value)
        return outer

    def _settle(self, request_id: str, inner: Future) -> None:
        with self._lock:
            entry = self._pending.pop(request_id, None)
        if entry is None:
            return  # already cancelled or terminated
        outer = entry[0]
        if inner.cancelled():
            outer.set_exception(AnalysisCancelledError(f"Request {request_id} was cancelled"))
            return
        error = inner.exception()
        if error is not None:
            logger.warning("Analysis %s failed: %s", request_id, error)
            outer.set_exception(error)
        else:
            outer.set_result(inner.result())

    def cancel(self, request_id: str) -> bool:
        """
        Reject a pending request.

        Returns:
            True if the request was pending
        """
        with self._lock:
            entry = self._pending.pop(request_id, None)
        if entry is None:
            return False
        outer, inner = entry
        inner.cancel()
        outer.set_exception(AnalysisCancelledError(f"Request {request_id} was cancelled"))
        logger.debug("Analysis %s cancelled", request_id)
        return True

    def terminate(self) -> None:
        """Reject every pending request and shut the executor down."""
        with self._lock:
            entries = list(self._pending.items())
            self._pending.clear()
            self._terminated = True
        for request_id, (outer, inner) in entries:
            inner.cancel()
            outer.set_exception(AnalysisCancelledError("Analysis worker terminated"))
        self._executor.shutdown(wait=False, cancel_futures=True)
        logger.info("Analysis worker terminated, %d pending requests rejected", len(entries))
