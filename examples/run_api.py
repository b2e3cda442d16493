from __future__ import annotations

import argparse
import logging

import uvicorn

from vizor.api import create_file_app
from vizor.capture import ProcessorConfig
from vizor.logger_config import setup_logger
from vizor.types import Frame
from vizor.vision import ExecutorDetector


def _frame_size(frame: Frame) -> dict:
    return {"width": frame.width, "height": frame.height}


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("video")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--fps", type=float, default=30.0)
    parser.add_argument("--live-viewport", action="store_true")
    args = parser.parse_args()

    setup_logger(logging.INFO)

    app = create_file_app(
        args.video,
        ExecutorDetector(_frame_size),
        target_fps=args.fps,
        config=ProcessorConfig(live_viewport=args.live_viewport),
    )

    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
