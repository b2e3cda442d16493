from __future__ import annotations

import argparse
import logging
import time
from typing import Any, Dict, List

import cv2
import numpy as np

from vizor.capture import CapturePipeline, Completion, FileSource, FrameProcessor, ProcessorConfig
from vizor.convert import frame_to_rgb
from vizor.logger_config import setup_logger
from vizor.types import Frame
from vizor.vision import ExecutorDetector


def _detect_boxes(frame: Frame) -> List[Dict[str, Any]]:
    rgb = frame_to_rgb(frame)
    gray = cv2.cvtColor(rgb, cv2.COLOR_RGB2GRAY)
    blur = cv2.GaussianBlur(gray, (3, 3), 0)
    edges = cv2.Canny(blur, 50, 150)
    contours, _ = cv2.findContours(edges, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)

    out: List[Dict[str, Any]] = []
    for cnt in contours:
        x, y, bw, bh = cv2.boundingRect(cnt)
        if bw * bh < 400:
            continue
        out.append({"bbox": [int(x), int(y), int(x + bw), int(y + bh)]})
    return out


def _draw(preview: np.ndarray, boxes: List[Dict[str, Any]], latency_ms: int, fps) -> np.ndarray:
    img = preview.copy()
    for box in boxes:
        x1, y1, x2, y2 = box["bbox"]
        cv2.rectangle(img, (x1, y1), (x2, y2), (0, 255, 0), 2)
    cv2.putText(
        img,
        f"latency={latency_ms}ms fps={fps}",
        (10, 20),
        cv2.FONT_HERSHEY_SIMPLEX,
        0.5,
        (255, 0, 0),
        1,
        cv2.LINE_AA,
    )
    return img


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("video")
    parser.add_argument("--fps", type=float, default=0.0)
    parser.add_argument("--live-viewport", action="store_true")
    parser.add_argument("--show", action="store_true")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    setup_logger(logging.DEBUG if args.verbose else logging.INFO)

    latest: Dict[str, Completion] = {}

    def sink(completion: Completion) -> None:
        latest["c"] = completion

    detector = ExecutorDetector(_detect_boxes)
    processor = FrameProcessor(detector, sink=sink, config=ProcessorConfig(live_viewport=args.live_viewport))
    source = FileSource(args.video, target_fps=args.fps if args.fps > 0 else None)
    pipeline = CapturePipeline(source=source, processor=processor)
    pipeline.start()

    t0 = time.perf_counter()
    try:
        while not pipeline.wait(timeout=0.03):
            now = time.perf_counter()
            if now - t0 >= 1.0:
                stats = processor.stats()
                slot = processor.slot_stats()
                print(
                    f"fps={stats.last_fps} runs={stats.count} avg={stats.mean_ms}ms "
                    f"min={stats.min_ms if stats.count else '-'} max={stats.max_ms} "
                    f"submitted={slot.submitted} dropped={slot.dropped}"
                )
                t0 = now

            c = latest.get("c")
            if args.show and c is not None and c.ok and c.preview is not None:
                img = _draw(c.preview, c.result, c.latency_ms, c.fps)
                cv2.imshow("Vizor", cv2.cvtColor(img, cv2.COLOR_RGB2BGR))
                if cv2.waitKey(1) & 0xFF == ord("q"):
                    break

    except KeyboardInterrupt:
        pass
    finally:
        pipeline.stop()
        detector.close()
        if args.show:
            cv2.destroyAllWindows()


if __name__ == "__main__":
    main()
