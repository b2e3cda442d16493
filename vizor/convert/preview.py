from __future__ import annotations

import io
from typing import Optional

import cv2
import numpy as np
from PIL import Image

from vizor.errors import InvalidBufferSize
from vizor.types import Frame, FrameMetadata, PixelFormat

from .buffers import Nv21Buffer, Yv12Buffer, chroma_size, yuv420_size
from .rotate import rotate_and_flip
from .yuv import yuv420_to_nv21, yv12_to_nv21


def nv21_to_rgb(nv21: Nv21Buffer) -> np.ndarray:
    w, h = nv21.width, nv21.height
    cw, ch = chroma_size(w, h)
    src = np.frombuffer(nv21.data, dtype=np.uint8)

    y = src[: w * h].reshape(h, w)
    vu = src[w * h :]

    # OpenCV wants even dimensions; replicate the last luma row/column and crop afterwards.
    if (2 * cw, 2 * ch) != (w, h):
        y = np.pad(y, ((0, 2 * ch - h), (0, 2 * cw - w)), mode="edge")

    packed = np.concatenate([y.reshape(-1), vu]).reshape(3 * ch, 2 * cw)
    rgb = cv2.cvtColor(packed, cv2.COLOR_YUV2RGB_NV21)
    return np.ascontiguousarray(rgb[:h, :w])


def _argb_to_rgb(frame: Frame) -> np.ndarray:
    plane = frame.planes[0]
    w, h = frame.width, frame.height
    if plane.pixel_stride != 4 or plane.row_stride % 4 != 0 or plane.row_stride < 4 * w:
        raise InvalidBufferSize(
            f"ARGB plane layout not supported: row_stride={plane.row_stride} pixel_stride={plane.pixel_stride}",
            expected=4 * w,
            actual=plane.row_stride,
        )
    needed = plane.row_stride * (h - 1) + 4 * w
    if len(plane.data) < needed:
        raise InvalidBufferSize(f"ARGB plane too short: {len(plane.data)} < {needed}", expected=needed, actual=len(plane.data))

    src = np.frombuffer(plane.data, dtype=np.uint8)
    full = plane.row_stride * h
    if len(src) < full:
        src = np.concatenate([src, np.zeros(full - len(src), dtype=np.uint8)])
    words = src[:full].reshape(h, plane.row_stride)[:, : 4 * w].copy().view("<u4")

    rgb = np.empty((h, w, 3), dtype=np.uint8)
    rgb[:, :, 0] = (words >> 16) & 0xFF
    rgb[:, :, 1] = (words >> 8) & 0xFF
    rgb[:, :, 2] = words & 0xFF
    return rgb


def _single_buffer(frame: Frame) -> bytes:
    size = yuv420_size(frame.width, frame.height)
    data = frame.planes[0].data
    if len(data) < size:
        raise InvalidBufferSize(
            f"{frame.pixel_format.name} {frame.width}x{frame.height} needs {size} bytes, got {len(data)}",
            expected=size,
            actual=len(data),
        )
    return bytes(data[:size])


def frame_to_rgb(frame: Frame, metadata: Optional[FrameMetadata] = None) -> np.ndarray:
    """Materialize ``frame`` as an upright (h, w, 3) RGB image."""
    if not frame.planes:
        raise InvalidBufferSize("frame has no planes")

    fmt = frame.pixel_format
    if fmt is PixelFormat.YUV420_888:
        rgb = nv21_to_rgb(yuv420_to_nv21(frame.planes, frame.width, frame.height))
    elif fmt is PixelFormat.NV21:
        rgb = nv21_to_rgb(Nv21Buffer(_single_buffer(frame), frame.width, frame.height))
    elif fmt is PixelFormat.YV12:
        rgb = nv21_to_rgb(yv12_to_nv21(Yv12Buffer(_single_buffer(frame), frame.width, frame.height)))
    else:
        rgb = _argb_to_rgb(frame)

    flip_x = metadata is not None and metadata.is_front_facing
    return rotate_and_flip(rgb, frame.rotation, flip_x=flip_x)


def encode_jpeg(rgb: np.ndarray, quality: int = 80) -> bytes:
    img = Image.fromarray(np.ascontiguousarray(rgb, dtype=np.uint8))
    buf = io.BytesIO()
    img.save(buf, format="JPEG", quality=quality)
    return buf.getvalue()
