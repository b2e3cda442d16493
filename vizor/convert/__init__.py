from .bitmap import argb_from_rgb, nv21_bytes_from_bitmap, nv21_from_bitmap, yv12_from_bitmap
from .buffers import Nv21Buffer, Yv12Buffer, chroma_size, yuv420_size
from .orientation import exif_transform, load_oriented_image
from .preview import encode_jpeg, frame_to_rgb, nv21_to_rgb
from .rotate import rotate_and_flip
from .yuv import are_uv_planes_nv21, nv21_to_yv12, yuv420_to_nv21, yv12_to_nv21

__all__ = [
    "Nv21Buffer",
    "Yv12Buffer",
    "chroma_size",
    "yuv420_size",
    "yuv420_to_nv21",
    "are_uv_planes_nv21",
    "nv21_to_yv12",
    "yv12_to_nv21",
    "argb_from_rgb",
    "nv21_bytes_from_bitmap",
    "nv21_from_bitmap",
    "yv12_from_bitmap",
    "rotate_and_flip",
    "frame_to_rgb",
    "nv21_to_rgb",
    "encode_jpeg",
    "exif_transform",
    "load_oriented_image",
]
