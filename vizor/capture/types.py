from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Any, Callable, Optional

import numpy as np

from vizor.types import Frame, FrameMetadata, PixelFormat, Plane

ReleaseFn = Callable[[], None]

logger = logging.getLogger(__name__)

__all__ = [
    "Completion",
    "Frame",
    "FrameMetadata",
    "InFlightFrame",
    "LatencyStats",
    "PendingFrame",
    "PixelFormat",
    "Plane",
    "ReleaseFn",
    "SlotStats",
    "SourceFrame",
]

UNSET_MIN_MS = sys.maxsize


@dataclass
class PendingFrame:
    frame: Frame
    metadata: FrameMetadata
    submitted_at: float
    release: Optional[ReleaseFn] = None
    still_image: bool = False
    _released: bool = False

    def release_once(self) -> None:
        if self._released:
            return
        self._released = True
        if self.release is None:
            return
        try:
            self.release()
        except Exception:
            logger.exception("Frame release callback failed")


@dataclass(frozen=True)
class InFlightFrame:
    pending: PendingFrame
    started_at: float
    preview: Optional[np.ndarray] = None


@dataclass(frozen=True)
class LatencyStats:
    count: int
    total_ms: int
    min_ms: int
    max_ms: int
    frames_this_second: int
    last_fps: int

    @property
    def mean_ms(self) -> int:
        return self.total_ms // self.count if self.count else 0


@dataclass(frozen=True)
class SlotStats:
    submitted: int
    dropped: int
    processed: int


@dataclass(frozen=True)
class Completion:
    frame: Frame
    metadata: FrameMetadata
    result: Any
    error: Optional[BaseException]
    latency_ms: int
    stats: LatencyStats
    fps: Optional[int]
    preview: Optional[np.ndarray] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SourceFrame:
    frame: Frame
    metadata: FrameMetadata
    release: Optional[ReleaseFn] = None
