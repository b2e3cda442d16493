"""Planar YUV 4:2:0 layout conversions.

NV21 holds all Y samples followed by interleaved V,U pairs::

    Y Y Y Y Y Y Y Y Y Y Y Y Y Y Y Y V U V U V U V U

YV12 holds the same Y plane followed by a contiguous V plane, then U::

    Y Y Y Y Y Y Y Y Y Y Y Y Y Y Y Y V V V V U U U U

YUV_420_888 describes the three planes separately, each with its own row and
pixel stride. Camera stacks commonly hand out U and V planes that are two
views on one interleaved VU buffer, offset by one byte; in that case the
chroma bytes are already in NV21 order and can be copied in bulk.
"""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np

from vizor.errors import InvalidBufferSize
from vizor.types import Plane

from .buffers import Nv21Buffer, Yv12Buffer, chroma_size, yuv420_size


def _as_array(data: bytes) -> np.ndarray:
    return np.frombuffer(data, dtype=np.uint8)


def _check_planes(planes: Sequence[Plane], width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise InvalidBufferSize(f"invalid image size {width}x{height}")
    if len(planes) < 3:
        raise InvalidBufferSize(f"YUV_420_888 needs 3 planes, got {len(planes)}")

    cw, ch = chroma_size(width, height)
    for name, plane, cols, rows in (
        ("Y", planes[0], width, height),
        ("U", planes[1], cw, ch),
        ("V", planes[2], cw, ch),
    ):
        if plane.row_stride <= 0 or plane.pixel_stride <= 0:
            raise InvalidBufferSize(f"{name} plane has invalid strides {plane.row_stride}/{plane.pixel_stride}")
        needed = plane.required_length(cols, rows)
        if len(plane.data) < needed:
            raise InvalidBufferSize(
                f"{name} plane too short for {cols}x{rows}: {len(plane.data)} < {needed}",
                expected=needed,
                actual=len(plane.data),
            )


def are_uv_planes_nv21(planes: Sequence[Plane], width: int, height: int) -> bool:
    """True when the U/V planes are one interleaved VU buffer, V starting one byte before U."""
    if width < 2 or height < 2:
        return False

    y_plane, u_plane, v_plane = planes[0], planes[1], planes[2]
    if y_plane.pixel_stride != 1 or y_plane.row_stride != width:
        return False
    if u_plane.pixel_stride != 2 or v_plane.pixel_stride != 2:
        return False

    cw, ch = chroma_size(width, height)
    chroma_len = 2 * cw * ch
    if u_plane.row_stride != 2 * cw or v_plane.row_stride != 2 * cw:
        return False

    # V lacks the last U byte and U lacks the first V byte.
    v_tail = v_plane.data[1:]
    u_head = u_plane.data[:-1]
    return len(v_tail) == chroma_len - 2 and len(u_plane.data) >= chroma_len - 1 and v_tail == u_head[: len(v_tail)]


def unpack_plane(plane: Plane, cols: int, rows: int, out: np.ndarray, offset: int, out_stride: int) -> None:
    """Copy ``rows`` x ``cols`` samples of ``plane`` into ``out`` starting at ``offset``.

    Consecutive samples land ``out_stride`` bytes apart; output rows carry no padding.
    """
    src = _as_array(plane.data)
    full = plane.row_stride * rows
    if len(src) < full:
        src = np.concatenate([src, np.zeros(full - len(src), dtype=np.uint8)])

    grid = src[:full].reshape(rows, plane.row_stride)
    samples = grid[:, 0 : plane.pixel_stride * cols : plane.pixel_stride]
    out[offset : offset + out_stride * rows * cols : out_stride] = samples.reshape(-1)


def _copy_nv21_fast(planes: Sequence[Plane], width: int, height: int) -> bytes:
    image_size = width * height
    cw, ch = chroma_size(width, height)
    chroma_len = 2 * cw * ch

    y_data = planes[0].data
    u_data = planes[1].data
    v_data = planes[2].data

    # First V byte from V, then the first U byte and every remaining VU pair from U.
    return bytes(y_data[:image_size]) + bytes(v_data[:1]) + bytes(u_data[: chroma_len - 1])


def _unpack_nv21(planes: Sequence[Plane], width: int, height: int) -> bytes:
    image_size = width * height
    cw, ch = chroma_size(width, height)

    out = np.zeros(yuv420_size(width, height), dtype=np.uint8)
    unpack_plane(planes[0], width, height, out, 0, 1)
    unpack_plane(planes[1], cw, ch, out, image_size + 1, 2)
    unpack_plane(planes[2], cw, ch, out, image_size, 2)
    return out.tobytes()


def yuv420_to_nv21(planes: Sequence[Plane], width: int, height: int) -> Nv21Buffer:
    _check_planes(planes, width, height)

    if are_uv_planes_nv21(planes, width, height):
        data = _copy_nv21_fast(planes, width, height)
    else:
        data = _unpack_nv21(planes, width, height)

    return Nv21Buffer(data=data, width=width, height=height)


def _split_sixths(total: int) -> tuple:
    if total == 0 or total % 6 != 0:
        raise InvalidBufferSize(f"buffer length {total} is not a multiple of 6", actual=total)
    row_size = total // 6
    return row_size * 4, row_size


def nv21_to_yv12(nv21: Union[Nv21Buffer, bytes]) -> Union[Yv12Buffer, bytes]:
    """De-interleave the VU pairs of an NV21 buffer into V and U planes.

    An :class:`Nv21Buffer` knows its dimensions; raw bytes are split into
    sixths (4 luma, 1 V, 1 U) and the result is returned as bytes.
    """
    if isinstance(nv21, Nv21Buffer):
        y_len = nv21.width * nv21.height
        cw, ch = chroma_size(nv21.width, nv21.height)
        c_len = cw * ch
        data = nv21.data
    else:
        data = bytes(nv21)
        y_len, c_len = _split_sixths(len(data))

    src = _as_array(data)
    vu = src[y_len : y_len + 2 * c_len]
    out = np.concatenate([src[:y_len], vu[0::2], vu[1::2]]).tobytes()

    if isinstance(nv21, Nv21Buffer):
        return Yv12Buffer(data=out, width=nv21.width, height=nv21.height)
    return out


def yv12_to_nv21(yv12: Union[Yv12Buffer, bytes]) -> Union[Nv21Buffer, bytes]:
    """Interleave the V and U planes of a YV12 buffer back into NV21 order."""
    if isinstance(yv12, Yv12Buffer):
        y_len = yv12.width * yv12.height
        cw, ch = chroma_size(yv12.width, yv12.height)
        c_len = cw * ch
        data = yv12.data
    else:
        data = bytes(yv12)
        y_len, c_len = _split_sixths(len(data))

    src = _as_array(data)
    out = np.empty(y_len + 2 * c_len, dtype=np.uint8)
    out[:y_len] = src[:y_len]
    out[y_len::2] = src[y_len : y_len + c_len]
    out[y_len + 1 :: 2] = src[y_len + c_len : y_len + 2 * c_len]

    if isinstance(yv12, Yv12Buffer):
        return Nv21Buffer(data=out.tobytes(), width=yv12.width, height=yv12.height)
    return out.tobytes()
