from __future__ import annotations

from .types import UNSET_MIN_MS, LatencyStats


class LatencyTracker:
    """Running detector latency aggregate plus a one-second completion window.

    Holds no lock; callers serialize ``record``, ``tick`` and ``reset``.
    """

    def __init__(self) -> None:
        self._count = 0
        self._total_ms = 0
        self._min_ms = UNSET_MIN_MS
        self._max_ms = 0

        self._frames_this_second = 0
        self._last_fps = 0

    def record(self, duration_ms: int) -> bool:
        """Add one sample. Returns True when it is the first of the current second."""
        duration_ms = max(0, int(duration_ms))

        self._count += 1
        self._total_ms += duration_ms
        self._min_ms = min(self._min_ms, duration_ms)
        self._max_ms = max(self._max_ms, duration_ms)

        self._frames_this_second += 1
        return self._frames_this_second == 1

    def tick(self) -> int:
        self._last_fps = self._frames_this_second
        self._frames_this_second = 0
        return self._last_fps

    def reset(self) -> None:
        # min/max and FPS survive a reset; only count and total follow the detector instance.
        self._count = 0
        self._total_ms = 0

    def snapshot(self) -> LatencyStats:
        return LatencyStats(
            count=self._count,
            total_ms=self._total_ms,
            min_ms=self._min_ms,
            max_ms=self._max_ms,
            frames_this_second=self._frames_this_second,
            last_fps=self._last_fps,
        )
