from .detector import Detector, ExecutorDetector

__all__ = [
    "Detector",
    "ExecutorDetector",
]
