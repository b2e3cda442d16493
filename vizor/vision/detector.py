from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional, Protocol

from vizor.types import Frame

logger = logging.getLogger(__name__)


class Detector(Protocol):
    def detect(self, frame: Frame) -> "Future[Any]":
        ...


class ExecutorDetector:
    """Runs a blocking detection function on a worker pool.

    The pool's threads are the completion context: results are reported
    from whichever worker finished the call.
    """

    def __init__(self, fn: Callable[[Frame], Any], max_workers: int = 1, name: str = "detector") -> None:
        self._fn = fn
        self._name = name
        self._executor: Optional[ThreadPoolExecutor] = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix=name
        )

    def detect(self, frame: Frame) -> "Future[Any]":
        if self._executor is None:
            raise RuntimeError(f"{self._name} is closed")
        return self._executor.submit(self._fn, frame)

    def close(self, wait: bool = True) -> None:
        executor = self._executor
        self._executor = None
        if executor is not None:
            logger.debug("Shutting down %s executor", self._name)
            executor.shutdown(wait=wait)
