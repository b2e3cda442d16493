"""Frame scheduling: at most one frame in flight, at most one pending.

A newer submission always replaces the pending frame, so the detector sees
the freshest frame available whenever it becomes free. Every state change
happens under one lock; the detector itself is called outside of it.
"""

from __future__ import annotations

import functools
import logging
import os
import threading
import time
from concurrent.futures import CancelledError, Future
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import numpy as np
import psutil

from vizor.convert import argb_from_rgb, frame_to_rgb
from vizor.errors import DetectorError, VizorError
from vizor.vision.detector import Detector

from .frame_slot import FrameSlot
from .latency import LatencyTracker
from .ticker import FpsTicker
from .types import Completion, Frame, FrameMetadata, InFlightFrame, LatencyStats, PendingFrame, ReleaseFn, SlotStats

logger = logging.getLogger(__name__)

ResultSink = Callable[[Completion], None]

_TRUTHY = {"1", "true", "yes", "on"}


class ProcessorState(Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    IN_FLIGHT_WITH_PENDING = "in_flight_with_pending"
    SHUT_DOWN = "shut_down"


@dataclass(frozen=True)
class ProcessorConfig:
    live_viewport: bool = False
    tick_interval_s: float = 1.0
    log_stats: bool = True

    @classmethod
    def from_env(cls) -> "ProcessorConfig":
        live = os.getenv("VIZOR_LIVE_VIEWPORT", "").strip().lower() in _TRUTHY
        interval = float(os.getenv("VIZOR_TICK_INTERVAL", "1.0"))
        return cls(live_viewport=live, tick_interval_s=interval)


class FrameProcessor:
    def __init__(
        self,
        detector: Detector,
        sink: Optional[ResultSink] = None,
        config: Optional[ProcessorConfig] = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._detector = detector
        self._sink = sink
        self._config = config or ProcessorConfig()
        self._clock = clock

        self._lock = threading.Lock()
        self._slot = FrameSlot()
        self._tracker = LatencyTracker()
        self._shutdown = False
        self._live_viewport = self._config.live_viewport
        self._ticker: Optional[FpsTicker] = None

    @property
    def config(self) -> ProcessorConfig:
        return self._config

    @property
    def live_viewport(self) -> bool:
        return self._live_viewport

    @live_viewport.setter
    def live_viewport(self, enabled: bool) -> None:
        self._live_viewport = bool(enabled)

    @property
    def state(self) -> ProcessorState:
        with self._lock:
            if self._shutdown:
                return ProcessorState.SHUT_DOWN
            if self._slot.processing is None:
                return ProcessorState.IDLE
            if self._slot.latest is not None:
                return ProcessorState.IN_FLIGHT_WITH_PENDING
            return ProcessorState.IN_FLIGHT

    def start(self) -> None:
        """Start the once-per-second FPS tick."""
        with self._lock:
            if self._shutdown or self._ticker is not None or self._config.tick_interval_s <= 0:
                return
            self._ticker = FpsTicker(self.tick, interval_s=self._config.tick_interval_s)
            ticker = self._ticker
        ticker.start()

    def submit(
        self,
        frame: Frame,
        metadata: Optional[FrameMetadata] = None,
        release: Optional[ReleaseFn] = None,
    ) -> bool:
        """Hand a frame to the processor without blocking.

        Returns False when the processor is shut down; the frame is released
        right away in that case.
        """
        return self._submit(frame, metadata, release, still_image=False)

    def process_still(self, rgb: np.ndarray, metadata: Optional[FrameMetadata] = None) -> bool:
        h, w = rgb.shape[:2]
        frame = Frame.from_argb(argb_from_rgb(rgb), w, h)
        return self._submit(frame, metadata, None, still_image=True)

    def _submit(
        self,
        frame: Frame,
        metadata: Optional[FrameMetadata],
        release: Optional[ReleaseFn],
        still_image: bool,
    ) -> bool:
        pending = PendingFrame(
            frame=frame,
            metadata=metadata or FrameMetadata.for_frame(frame),
            submitted_at=self._clock(),
            release=release,
            still_image=still_image,
        )

        with self._lock:
            if self._shutdown:
                accepted = False
                superseded = None
                promoted = None
            else:
                accepted = True
                superseded = self._slot.offer(pending)
                promoted = self._slot.promote()

        if not accepted:
            logger.debug("Processor shut down, ignoring %dx%d frame", frame.width, frame.height)
            pending.release_once()
            return False

        if superseded is not None:
            superseded.release_once()
        if promoted is not None:
            self._dispatch(promoted)
        return True

    def _materialize(self, pending: PendingFrame) -> Optional[np.ndarray]:
        if self._live_viewport or pending.still_image:
            return None
        try:
            return frame_to_rgb(pending.frame, pending.metadata)
        except VizorError as e:
            logger.warning("Could not build preview image: %s", e)
            return None
        except Exception:
            logger.exception("Preview materialization failed")
            return None

    def _dispatch(self, pending: PendingFrame) -> None:
        # A concurrent shutdown may land before this point. The frame was
        # already accepted, so it still goes to the detector and its
        # completion is discarded by _on_complete.
        preview = self._materialize(pending)

        in_flight = InFlightFrame(pending=pending, started_at=self._clock(), preview=preview)
        try:
            future = self._detector.detect(pending.frame)
        except Exception as e:
            future = Future()
            future.set_exception(e)

        future.add_done_callback(functools.partial(self._on_complete, in_flight))

    def _on_complete(self, in_flight: InFlightFrame, future: "Future[Any]") -> None:
        latency_ms = max(0, int((self._clock() - in_flight.started_at) * 1000))
        result, error = _unwrap(future)

        stats: Optional[LatencyStats] = None
        first_in_second = False
        promoted: Optional[PendingFrame] = None
        with self._lock:
            self._slot.complete()
            shut_down = self._shutdown
            if not shut_down:
                first_in_second = self._tracker.record(latency_ms)
                stats = self._tracker.snapshot()
                promoted = self._slot.promote()

        pending = in_flight.pending
        pending.release_once()

        if shut_down:
            logger.debug("Detection finished after shutdown, result discarded")
            return

        if first_in_second and self._config.log_stats:
            _log_stats(stats)

        if error is not None:
            logger.warning("Failed to process frame: %s", error)

        completion = Completion(
            frame=pending.frame,
            metadata=pending.metadata,
            result=result,
            error=error,
            latency_ms=latency_ms,
            stats=stats,
            fps=None if pending.still_image else stats.last_fps,
            preview=in_flight.preview,
        )
        self._deliver(completion)

        if promoted is not None:
            self._dispatch(promoted)

    def _deliver(self, completion: Completion) -> None:
        if self._sink is None:
            return
        try:
            self._sink(completion)
        except Exception:
            logger.exception("Result sink raised")

    def tick(self) -> Optional[int]:
        with self._lock:
            if self._shutdown:
                return None
            return self._tracker.tick()

    def stats(self) -> LatencyStats:
        with self._lock:
            return self._tracker.snapshot()

    def slot_stats(self) -> SlotStats:
        with self._lock:
            return self._slot.stats()

    def shutdown(self) -> None:
        with self._lock:
            if self._shutdown:
                return
            self._shutdown = True
            drained = self._slot.drain()
            self._tracker.reset()
            ticker = self._ticker
            self._ticker = None

        if drained is not None:
            drained.release_once()
        if ticker is not None:
            ticker.stop()
        logger.info("Frame processor shut down")


def _unwrap(future: "Future[Any]"):
    try:
        return future.result(), None
    except CancelledError as e:
        error = DetectorError("detection cancelled")
        error.__cause__ = e
        return None, error
    except DetectorError as e:
        return None, e
    except Exception as e:
        error = DetectorError(str(e) or type(e).__name__)
        error.__cause__ = e
        return None, error


def _log_stats(stats: LatencyStats) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug("Max latency is: %d", stats.max_ms)
    logger.debug("Min latency is: %d", stats.min_ms)
    logger.debug("Num of Runs: %d, Avg latency is: %d", stats.count, stats.mean_ms)
    available_mb = psutil.virtual_memory().available // 0x100000
    logger.debug("Memory available in system: %d MB", available_mb)
