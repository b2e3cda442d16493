"""
Shared fixtures for vizor tests.
"""

import threading
from concurrent.futures import Future

import numpy as np
import pytest

from vizor.types import Frame, Plane


class FakeDetector:
    """Detector whose futures are resolved by the test."""

    def __init__(self):
        self.calls = []
        self._lock = threading.Lock()
        self.outstanding = 0
        self.max_outstanding = 0

    def detect(self, frame):
        future = Future()
        with self._lock:
            self.outstanding += 1
            self.max_outstanding = max(self.max_outstanding, self.outstanding)
        # Registered before the processor's callback, so it runs first.
        future.add_done_callback(self._done)
        self.calls.append((frame, future))
        return future

    def _done(self, future):
        with self._lock:
            self.outstanding -= 1

    @property
    def seen_tags(self):
        return [frame_tag(frame) for frame, _ in self.calls]

    def succeed(self, index=-1, result="ok"):
        self.calls[index][1].set_result(result)

    def fail(self, index=-1, error=None):
        self.calls[index][1].set_exception(error or RuntimeError("detector blew up"))


class FakeClock:
    def __init__(self, start=100.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class ReleaseCounter:
    def __init__(self):
        self.counts = {}

    def callback(self, tag):
        def release():
            self.counts[tag] = self.counts.get(tag, 0) + 1

        return release


def tagged_frame(tag, width=2, height=2):
    """NV21 frame whose bytes all equal ``tag``."""
    size = width * height + 2 * ((width + 1) // 2) * ((height + 1) // 2)
    return Frame.from_nv21(bytes([tag]) * size, width, height)


def frame_tag(frame):
    return frame.planes[0].data[0]


def interleaved_planes(y, vu, width, cw):
    """YUV_420_888 planes sharing one VU buffer, V one byte before U."""
    return (
        Plane(bytes(y), row_stride=width, pixel_stride=1),
        Plane(bytes(vu[1:]), row_stride=2 * cw, pixel_stride=2),
        Plane(bytes(vu[:-1]), row_stride=2 * cw, pixel_stride=2),
    )


@pytest.fixture
def detector():
    return FakeDetector()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def releases():
    return ReleaseCounter()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)
