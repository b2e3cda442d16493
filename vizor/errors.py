from __future__ import annotations

from typing import Optional


class VizorError(Exception):
    pass


class InvalidBufferSize(VizorError, ValueError):
    """A buffer's length does not fit the stated width/height/format."""

    def __init__(self, message: str, *, expected: Optional[int] = None, actual: Optional[int] = None) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class DetectorError(VizorError):
    """Opaque detector failure. The original exception is chained as ``__cause__``."""
