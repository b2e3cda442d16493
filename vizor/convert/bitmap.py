from __future__ import annotations

from typing import Sequence

import numpy as np

from vizor.errors import InvalidBufferSize

from .buffers import Nv21Buffer, Yv12Buffer
from .yuv import nv21_to_yv12


def argb_from_rgb(rgb: np.ndarray) -> np.ndarray:
    """Pack an (h, w, 3) uint8 RGB image into opaque ARGB words."""
    if rgb.ndim != 3 or rgb.shape[2] < 3:
        raise InvalidBufferSize(f"expected an (h, w, 3) image, got shape {rgb.shape}")
    c = rgb[:, :, :3].astype(np.uint32)
    return (np.uint32(0xFF000000) | (c[:, :, 0] << 16) | (c[:, :, 1] << 8) | c[:, :, 2]).reshape(-1)


def _rgb_to_yuv(pixels: Sequence[int], width: int, height: int):
    if width <= 0 or height <= 0:
        raise InvalidBufferSize(f"invalid bitmap size {width}x{height}")

    argb = np.asarray(pixels, dtype=np.int64).reshape(-1)
    if argb.size != width * height:
        raise InvalidBufferSize(
            f"bitmap {width}x{height} needs {width * height} pixels, got {argb.size}",
            expected=width * height,
            actual=int(argb.size),
        )

    # alpha is unused
    red = (argb >> 16) & 0xFF
    green = (argb >> 8) & 0xFF
    blue = argb & 0xFF

    # Integer BT.601; numpy's >> on signed ints is an arithmetic shift.
    y = ((66 * red + 129 * green + 25 * blue + 128) >> 8) + 16
    u = ((-38 * red - 74 * green + 112 * blue + 128) >> 8) + 128
    v = ((112 * red - 94 * green - 18 * blue + 128) >> 8) + 128

    y = np.clip(y, 0, 255).astype(np.uint8).reshape(height, width)
    u = np.clip(u, 0, 255).astype(np.uint8).reshape(height, width)
    v = np.clip(v, 0, 255).astype(np.uint8).reshape(height, width)
    return y, u, v


def nv21_bytes_from_bitmap(pixels: Sequence[int], width: int, height: int) -> bytes:
    y, u, v = _rgb_to_yuv(pixels, width, height)

    # One VU pair per 2x2 block, taken from the pixel at even row and even column.
    vu = np.stack([v[0::2, 0::2], u[0::2, 0::2]], axis=-1)
    return y.tobytes() + vu.tobytes()


def nv21_from_bitmap(pixels: Sequence[int], width: int, height: int) -> Nv21Buffer:
    return Nv21Buffer(data=nv21_bytes_from_bitmap(pixels, width, height), width=width, height=height)


def yv12_from_bitmap(pixels: Sequence[int], width: int, height: int) -> Yv12Buffer:
    return nv21_to_yv12(nv21_from_bitmap(pixels, width, height))
