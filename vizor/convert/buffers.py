from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from vizor.errors import InvalidBufferSize


def chroma_size(width: int, height: int) -> Tuple[int, int]:
    """(columns, rows) of one 4:2:0 chroma channel."""
    return (width + 1) // 2, (height + 1) // 2


def yuv420_size(width: int, height: int) -> int:
    cw, ch = chroma_size(width, height)
    return width * height + 2 * cw * ch


def _check_dims(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise InvalidBufferSize(f"invalid image size {width}x{height}")


@dataclass(frozen=True)
class Nv21Buffer:
    data: bytes
    width: int
    height: int

    def __post_init__(self) -> None:
        _check_dims(self.width, self.height)
        expected = yuv420_size(self.width, self.height)
        if len(self.data) != expected:
            raise InvalidBufferSize(
                f"NV21 {self.width}x{self.height} needs {expected} bytes, got {len(self.data)}",
                expected=expected,
                actual=len(self.data),
            )

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class Yv12Buffer:
    data: bytes
    width: int
    height: int

    def __post_init__(self) -> None:
        _check_dims(self.width, self.height)
        expected = yuv420_size(self.width, self.height)
        if len(self.data) != expected:
            raise InvalidBufferSize(
                f"YV12 {self.width}x{self.height} needs {expected} bytes, got {len(self.data)}",
                expected=expected,
                actual=len(self.data),
            )

    def __len__(self) -> int:
        return len(self.data)
