from __future__ import annotations

from typing import Optional

from .types import PendingFrame, SlotStats


class FrameSlot:
    """Latest/processing frame pair with drop-oldest-pending semantics.

    Not thread-safe on its own: the owning processor holds its lock around
    every call.
    """

    def __init__(self) -> None:
        self._latest: Optional[PendingFrame] = None
        self._processing: Optional[PendingFrame] = None

        self._submitted = 0
        self._dropped = 0
        self._processed = 0

    @property
    def latest(self) -> Optional[PendingFrame]:
        return self._latest

    @property
    def processing(self) -> Optional[PendingFrame]:
        return self._processing

    def offer(self, pending: PendingFrame) -> Optional[PendingFrame]:
        """Store ``pending`` as the latest frame and return the one it replaced."""
        superseded = self._latest
        if superseded is not None:
            self._dropped += 1

        self._submitted += 1
        self._latest = pending
        return superseded

    def promote(self) -> Optional[PendingFrame]:
        if self._processing is not None or self._latest is None:
            return None

        self._processing = self._latest
        self._latest = None
        return self._processing

    def complete(self) -> Optional[PendingFrame]:
        done = self._processing
        self._processing = None
        if done is not None:
            self._processed += 1
        return done

    def drain(self) -> Optional[PendingFrame]:
        pending = self._latest
        self._latest = None
        return pending

    def stats(self) -> SlotStats:
        return SlotStats(submitted=self._submitted, dropped=self._dropped, processed=self._processed)
