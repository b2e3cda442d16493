from .errors import DetectorError, InvalidBufferSize, VizorError

__all__ = [
    "DetectorError",
    "InvalidBufferSize",
    "VizorError",
]

__version__ = "0.1.0"
