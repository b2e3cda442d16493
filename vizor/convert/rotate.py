from __future__ import annotations

import numpy as np


def normalize_degrees(degrees: int) -> int:
    if degrees % 90 != 0:
        raise ValueError(f"rotation must be a multiple of 90 degrees, got {degrees}")
    return degrees % 360


def rotate_and_flip(image: np.ndarray, degrees: int, flip_x: bool = False, flip_y: bool = False) -> np.ndarray:
    """Rotate ``image`` clockwise by ``degrees``, then mirror it.

    ``flip_x`` mirrors left/right and ``flip_y`` top/bottom. The identity
    transform returns ``image`` itself; anything else returns a new array.
    """
    degrees = normalize_degrees(degrees)
    if degrees == 0 and not flip_x and not flip_y:
        return image

    out = np.rot90(image, k=-(degrees // 90), axes=(0, 1))
    if flip_x:
        out = np.flip(out, axis=1)
    if flip_y:
        out = np.flip(out, axis=0)
    return np.ascontiguousarray(out)
