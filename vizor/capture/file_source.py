from __future__ import annotations

import logging
import threading
import time
from typing import Iterator, Optional

import cv2
import numpy as np

from vizor.convert import argb_from_rgb, chroma_size, nv21_bytes_from_bitmap
from vizor.types import Frame, FrameMetadata, PixelFormat, Plane

from .types import SourceFrame

logger = logging.getLogger(__name__)


def rgb_to_yuv420_frame(rgb: np.ndarray, rotation: int = 0) -> Frame:
    """Lay an RGB image out the way camera HALs hand out YUV_420_888.

    U and V are two views on one interleaved VU buffer, V starting one byte
    before U, both with a pixel stride of 2.
    """
    h, w = rgb.shape[:2]
    nv21 = nv21_bytes_from_bitmap(argb_from_rgb(rgb), w, h)
    cw, _ = chroma_size(w, h)

    luma = nv21[: w * h]
    vu = nv21[w * h :]
    planes = (
        Plane(luma, row_stride=w, pixel_stride=1),
        Plane(vu[1:], row_stride=2 * cw, pixel_stride=2),
        Plane(vu[:-1], row_stride=2 * cw, pixel_stride=2),
    )
    return Frame(w, h, rotation, PixelFormat.YUV420_888, planes)


class FileSource:
    def __init__(
        self,
        path: str,
        realtime: bool = True,
        target_fps: Optional[float] = None,
        rotation: int = 0,
        camera_facing: str = "back",
    ) -> None:
        self._path = path
        self._realtime = realtime
        self._target_fps = target_fps
        self._rotation = rotation
        self._camera_facing = camera_facing
        self._cap: Optional[cv2.VideoCapture] = None
        self._closed = False

        self._lock = threading.Lock()
        self._outstanding = 0

    @property
    def outstanding(self) -> int:
        """Frames handed out and not yet released."""
        with self._lock:
            return self._outstanding

    def _make_release(self):
        released = False

        def release() -> None:
            nonlocal released
            with self._lock:
                if released:
                    logger.warning("Frame from %s released twice", self._path)
                    return
                released = True
                self._outstanding -= 1

        return release

    def frames(self) -> Iterator[SourceFrame]:
        if self._closed:
            return

        self._cap = cv2.VideoCapture(self._path)
        if not self._cap.isOpened():
            raise RuntimeError(f"Cannot open video file: {self._path}")

        fps = self._cap.get(cv2.CAP_PROP_FPS)
        if not fps or fps <= 0:
            fps = 30.0

        if self._target_fps and self._target_fps > 0:
            fps = self._target_fps

        period = 1.0 / fps
        next_deadline = time.perf_counter()

        while not self._closed:
            ok, bgr = self._cap.read()
            if not ok:
                break

            rgb = cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)
            frame = rgb_to_yuv420_frame(rgb, rotation=self._rotation)
            metadata = FrameMetadata.for_frame(frame, camera_facing=self._camera_facing)

            with self._lock:
                self._outstanding += 1
            yield SourceFrame(frame=frame, metadata=metadata, release=self._make_release())

            if self._realtime:
                now = time.perf_counter()
                if now < next_deadline:
                    time.sleep(next_deadline - now)
                next_deadline = max(next_deadline + period, time.perf_counter())

    def close(self) -> None:
        self._closed = True
        if self._cap is not None:
            self._cap.release()
            self._cap = None
