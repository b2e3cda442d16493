from __future__ import annotations

import logging
import threading
from typing import Optional

from .processor import FrameProcessor
from .video_source import CameraSource

logger = logging.getLogger(__name__)


class CapturePipeline:
    """Feeds every frame of a camera source into a processor on a daemon thread."""

    def __init__(self, source: CameraSource, processor: FrameProcessor) -> None:
        self._source = source
        self._processor = processor

        self._thread: Optional[threading.Thread] = None
        self._stop_evt = threading.Event()
        self._finished = threading.Event()

    @property
    def processor(self) -> FrameProcessor:
        return self._processor

    def start(self) -> None:
        if self._thread is not None:
            return

        self._stop_evt.clear()
        self._finished.clear()
        self._processor.start()
        self._thread = threading.Thread(target=self._run, name="capture-pipeline", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        submitted = 0
        try:
            for item in self._source.frames():
                if self._stop_evt.is_set():
                    if item.release is not None:
                        item.release()
                    break
                self._processor.submit(item.frame, item.metadata, item.release)
                submitted += 1
        except Exception:
            logger.exception("Camera source failed")
        finally:
            self._source.close()
            logger.info("Capture finished after %d frames", submitted)
            self._finished.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the source is exhausted or the pipeline stopped."""
        return self._finished.wait(timeout)

    def stop(self) -> None:
        self._stop_evt.set()
        self._source.close()
        self._processor.shutdown()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=2.0)
