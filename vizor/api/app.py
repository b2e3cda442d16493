from __future__ import annotations

import threading
from dataclasses import asdict
from typing import Optional

from fastapi import FastAPI, Query, Response

from vizor.capture import CapturePipeline, Completion, FileSource, FrameProcessor, ProcessorConfig
from vizor.convert import encode_jpeg
from vizor.vision import Detector


class LatestCompletion:
    """Result sink that keeps only the most recent completion."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._latest: Optional[Completion] = None
        self._delivered = 0

    def __call__(self, completion: Completion) -> None:
        with self._lock:
            self._latest = completion
            self._delivered += 1

    def get(self) -> Optional[Completion]:
        with self._lock:
            return self._latest

    @property
    def delivered(self) -> int:
        with self._lock:
            return self._delivered


def _completion_meta(c: Completion) -> dict:
    return {
        "ok": c.ok,
        "width": c.frame.width,
        "height": c.frame.height,
        "rotation": c.frame.rotation,
        "pixel_format": c.frame.pixel_format.name,
        "camera_facing": c.metadata.camera_facing,
        "latency_ms": c.latency_ms,
        "fps": c.fps,
        "result": None if c.result is None else repr(c.result),
        "error": None if c.error is None else str(c.error),
        "has_preview": c.preview is not None,
    }


def create_app(
    processor: FrameProcessor,
    sink: LatestCompletion,
    *,
    pipeline: Optional[CapturePipeline] = None,
) -> FastAPI:
    """HTTP view over a running processor; ``sink`` must be the processor's result sink."""
    app = FastAPI(title="Vizor API")

    @app.on_event("startup")
    def _startup() -> None:
        if pipeline is not None:
            pipeline.start()
        else:
            processor.start()

    @app.on_event("shutdown")
    def _shutdown() -> None:
        if pipeline is not None:
            pipeline.stop()
        else:
            processor.shutdown()

    @app.get("/stats")
    def stats() -> dict:
        latency = processor.stats()
        return {
            "state": processor.state.value,
            "live_viewport": processor.live_viewport,
            "latency": {**asdict(latency), "mean_ms": latency.mean_ms},
            "slot": asdict(processor.slot_stats()),
            "delivered": sink.delivered,
        }

    @app.get("/latest_result")
    def latest_result() -> dict:
        completion = sink.get()
        return {
            "ok": completion is not None,
            "completion": None if completion is None else _completion_meta(completion),
        }

    @app.get("/latest_preview_jpeg")
    def latest_preview_jpeg(quality: int = Query(default=80, ge=10, le=95)) -> Response:
        completion = sink.get()
        if completion is None or completion.preview is None:
            return Response(status_code=404)

        data = encode_jpeg(completion.preview, quality=quality)
        return Response(content=data, media_type="image/jpeg")

    return app


def create_file_app(
    path: str,
    detector: Detector,
    *,
    target_fps: Optional[float] = None,
    realtime: bool = True,
    config: Optional[ProcessorConfig] = None,
) -> FastAPI:
    sink = LatestCompletion()
    processor = FrameProcessor(detector, sink=sink, config=config or ProcessorConfig.from_env())
    source = FileSource(path, realtime=realtime, target_fps=target_fps)
    pipeline = CapturePipeline(source=source, processor=processor)
    return create_app(processor, sink, pipeline=pipeline)
