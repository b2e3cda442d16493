from .file_source import FileSource, rgb_to_yuv420_frame
from .frame_slot import FrameSlot
from .latency import LatencyTracker
from .pipeline import CapturePipeline
from .processor import FrameProcessor, ProcessorConfig, ProcessorState, ResultSink
from .ticker import FpsTicker
from .types import (
    Completion,
    Frame,
    FrameMetadata,
    InFlightFrame,
    LatencyStats,
    PendingFrame,
    PixelFormat,
    Plane,
    SlotStats,
    SourceFrame,
)
from .video_source import CameraSource

__all__ = [
    "Frame",
    "FrameMetadata",
    "PixelFormat",
    "Plane",
    "PendingFrame",
    "InFlightFrame",
    "LatencyStats",
    "SlotStats",
    "SourceFrame",
    "Completion",
    "CameraSource",
    "FileSource",
    "rgb_to_yuv420_frame",
    "FrameSlot",
    "LatencyTracker",
    "FpsTicker",
    "FrameProcessor",
    "ProcessorConfig",
    "ProcessorState",
    "ResultSink",
    "CapturePipeline",
]
