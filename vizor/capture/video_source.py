from __future__ import annotations

from typing import Iterator, Protocol

from .types import SourceFrame


class CameraSource(Protocol):
    def frames(self) -> Iterator[SourceFrame]:
        ...

    def close(self) -> None:
        ...
