"""
Tests for camera-source adapters and the capture pipeline.
"""

import threading
import time

import numpy as np

from vizor.capture import (
    CapturePipeline,
    FpsTicker,
    FrameMetadata,
    FrameProcessor,
    ProcessorConfig,
    SourceFrame,
    rgb_to_yuv420_frame,
)
from vizor.convert import are_uv_planes_nv21, argb_from_rgb, nv21_bytes_from_bitmap, yuv420_to_nv21
from vizor.vision import ExecutorDetector

from conftest import frame_tag, tagged_frame


class ListSource:
    def __init__(self, frames, releases):
        self._frames = frames
        self._releases = releases
        self.closed = False

    def frames(self):
        for frame in self._frames:
            yield SourceFrame(
                frame=frame,
                metadata=FrameMetadata.for_frame(frame),
                release=self._releases.callback(frame_tag(frame)),
            )

    def close(self):
        self.closed = True


def test_rgb_frame_uses_interleaved_chroma(rng):
    rgb = rng.integers(0, 256, size=(6, 8, 3), dtype=np.uint8)
    frame = rgb_to_yuv420_frame(rgb)

    assert are_uv_planes_nv21(frame.planes, 8, 6)
    expected = nv21_bytes_from_bitmap(argb_from_rgb(rgb), 8, 6)
    assert yuv420_to_nv21(frame.planes, 8, 6).data == expected


def test_odd_sized_rgb_frame_round_trips(rng):
    rgb = rng.integers(0, 256, size=(3, 5, 3), dtype=np.uint8)
    frame = rgb_to_yuv420_frame(rgb)
    expected = nv21_bytes_from_bitmap(argb_from_rgb(rgb), 5, 3)
    assert yuv420_to_nv21(frame.planes, 5, 3).data == expected


def test_pipeline_releases_every_frame(releases):
    frames = [tagged_frame(tag) for tag in range(1, 21)]
    source = ListSource(frames, releases)
    delivered = []
    detector = ExecutorDetector(frame_tag)
    processor = FrameProcessor(
        detector,
        sink=delivered.append,
        config=ProcessorConfig(live_viewport=True, tick_interval_s=0),
    )
    pipeline = CapturePipeline(source=source, processor=processor)

    pipeline.start()
    assert pipeline.wait(timeout=5.0)

    deadline = time.monotonic() + 5.0
    while not (delivered and delivered[-1].result == 20) and time.monotonic() < deadline:
        time.sleep(0.01)
    pipeline.stop()
    detector.close()

    assert source.closed
    assert sorted(releases.counts) == list(range(1, 21))
    assert all(count == 1 for count in releases.counts.values())
    assert delivered[-1].result == 20


def test_ticker_calls_back_until_stopped():
    fired = threading.Event()
    ticker = FpsTicker(fired.set, interval_s=0.01)
    ticker.start()
    assert fired.wait(timeout=2.0)
    ticker.stop()
    assert not ticker.running
