from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

import numpy as np

VALID_ROTATIONS = (0, 90, 180, 270)


class PixelFormat(Enum):
    YUV420_888 = "yuv420_888"
    NV21 = "nv21"
    YV12 = "yv12"
    ARGB = "argb"


@dataclass(frozen=True)
class Plane:
    data: bytes
    row_stride: int
    pixel_stride: int

    def required_length(self, cols: int, rows: int) -> int:
        """Smallest buffer that holds ``rows`` x ``cols`` samples; the last row may omit its padding."""
        if cols <= 0 or rows <= 0:
            return 0
        return self.row_stride * (rows - 1) + self.pixel_stride * (cols - 1) + 1


@dataclass(frozen=True)
class Frame:
    width: int
    height: int
    rotation: int
    pixel_format: PixelFormat
    planes: Tuple[Plane, ...]

    def __post_init__(self) -> None:
        if self.rotation not in VALID_ROTATIONS:
            raise ValueError(f"rotation must be one of {VALID_ROTATIONS}, got {self.rotation}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"invalid frame size {self.width}x{self.height}")
        object.__setattr__(self, "planes", tuple(self.planes))

    @classmethod
    def from_nv21(cls, data: bytes, width: int, height: int, rotation: int = 0) -> "Frame":
        return cls(width, height, rotation, PixelFormat.NV21, (Plane(bytes(data), width, 1),))

    @classmethod
    def from_yv12(cls, data: bytes, width: int, height: int, rotation: int = 0) -> "Frame":
        return cls(width, height, rotation, PixelFormat.YV12, (Plane(bytes(data), width, 1),))

    @classmethod
    def from_argb(cls, pixels: Sequence[int], width: int, height: int, rotation: int = 0) -> "Frame":
        words = (np.asarray(pixels, dtype=np.int64).reshape(-1) & 0xFFFFFFFF).astype("<u4")
        return cls(width, height, rotation, PixelFormat.ARGB, (Plane(words.tobytes(), width * 4, 4),))


@dataclass(frozen=True)
class FrameMetadata:
    width: int
    height: int
    rotation: int = 0
    camera_facing: str = "back"

    @property
    def is_front_facing(self) -> bool:
        return self.camera_facing == "front"

    @classmethod
    def for_frame(cls, frame: Frame, camera_facing: str = "back") -> "FrameMetadata":
        return cls(width=frame.width, height=frame.height, rotation=frame.rotation, camera_facing=camera_facing)
