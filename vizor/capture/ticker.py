from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class FpsTicker:
    """Calls ``callback`` every ``interval_s`` seconds on a daemon thread."""

    def __init__(self, callback: Callable[[], object], interval_s: float = 1.0) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")

        self._callback = callback
        self._interval_s = interval_s
        self._thread: Optional[threading.Thread] = None
        self._stop_evt = threading.Event()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            return

        self._stop_evt.clear()
        self._thread = threading.Thread(target=self._run, name="fps-ticker", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stop_evt.wait(self._interval_s):
            try:
                self._callback()
            except Exception:
                logger.exception("FPS tick failed")

    def stop(self) -> None:
        self._stop_evt.set()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._interval_s * 2)
