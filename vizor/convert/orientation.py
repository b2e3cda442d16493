from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image

from .rotate import rotate_and_flip

logger = logging.getLogger(__name__)

EXIF_ORIENTATION_TAG = 0x0112

ORIENTATION_NORMAL = 1
ORIENTATION_FLIP_HORIZONTAL = 2
ORIENTATION_ROTATE_180 = 3
ORIENTATION_FLIP_VERTICAL = 4
ORIENTATION_TRANSPOSE = 5
ORIENTATION_ROTATE_90 = 6
ORIENTATION_TRANSVERSE = 7
ORIENTATION_ROTATE_270 = 8

_TRANSFORMS = {
    ORIENTATION_FLIP_HORIZONTAL: (0, True, False),
    ORIENTATION_ROTATE_90: (90, False, False),
    ORIENTATION_TRANSPOSE: (90, True, False),
    ORIENTATION_ROTATE_180: (180, False, False),
    ORIENTATION_FLIP_VERTICAL: (0, False, True),
    ORIENTATION_ROTATE_270: (-90, False, False),
    ORIENTATION_TRANSVERSE: (-90, True, False),
}


def exif_transform(orientation: int) -> Tuple[int, bool, bool]:
    """(degrees, flip_x, flip_y) that straighten an image with the given EXIF orientation."""
    return _TRANSFORMS.get(orientation, (0, False, False))


def load_oriented_image(path: Union[str, Path]) -> np.ndarray:
    with Image.open(path) as img:
        try:
            orientation = int(img.getexif().get(EXIF_ORIENTATION_TAG, ORIENTATION_NORMAL))
        except (TypeError, ValueError):
            logger.warning("Unreadable EXIF orientation in %s, assuming normal", path)
            orientation = ORIENTATION_NORMAL
        rgb = np.asarray(img.convert("RGB"), dtype=np.uint8)

    degrees, flip_x, flip_y = exif_transform(orientation)
    return rotate_and_flip(rgb, degrees, flip_x, flip_y)
