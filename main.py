#!/usr/bin/env python3
"""
Snapshot filter bench
Live webcam preview; SPACE captures a frame and renders every filter slot.
Keys 1-5 switch the face-region effect, each threshold slot has a slider,
q or ESC quits.
"""
import argparse
import logging
import os
from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

import cv2

# --- Centralized Logging Configuration ---
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
    datefmt='%H:%M:%S'
)

from models.effect_config import DEFAULT_EFFECTS, KEY_TO_REGION_MODE, ORIGINAL_SLOT
from pipeline.frame_orchestrator import FrameOrchestrator
from repositories.display_repository import WindowDisplaySink
from services.capture_service import CaptureService
from services.display_service import DisplayService
from services.parameter_service import ParameterService
from services.region_detection_service import RegionDetectionService

logger = logging.getLogger(__name__)

PREVIEW_WINDOW = "video"
SNAP_KEY = ord(" ")
QUIT_KEYS = (ord("q"), 27)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Render a webcam snapshot through a battery of image filters.")
    parser.add_argument("--image", help="Use a still image instead of the webcam.")
    parser.add_argument("--scale", type=int, default=int(os.getenv("DISPLAY_SCALE", "2")),
                        help="Integer zoom of every slot window.")
    return parser.parse_args(argv)


def _threshold_callback(orchestrator: FrameOrchestrator, parameters: ParameterService, effect_name: str):
    def on_change(value: int) -> None:
        parameters.set_threshold(effect_name, value)
        orchestrator.refresh_threshold(effect_name)
    return on_change


def main(argv=None) -> int:
    args = parse_args(argv)

    slots = [ORIGINAL_SLOT] + [cfg.slot for cfg in DEFAULT_EFFECTS.values()]
    sink = WindowDisplaySink(slots, scale=args.scale)
    threshold_effects = [name for name, cfg in DEFAULT_EFFECTS.items() if cfg.is_threshold]
    parameters = ParameterService(threshold_effects)
    detection_service = RegionDetectionService()
    detection_service.warm_up()
    orchestrator = FrameOrchestrator(DisplayService(sink), detection_service, parameter_service=parameters)

    for name in threshold_effects:
        sink.add_trackbar(DEFAULT_EFFECTS[name].slot, "threshold", parameters.threshold_for(name),
                          _threshold_callback(orchestrator, parameters, name))

    capture = CaptureService()
    live = args.image is None
    if not live:
        orchestrator.process(capture.from_file(args.image))

    try:
        while True:
            if live:
                frame = capture.preview()
                if frame is None:
                    logger.error("No camera frame; press q to quit")
                    live = False
                else:
                    cv2.imshow(PREVIEW_WINDOW, frame)

            key = cv2.waitKey(30) & 0xFF
            if key in QUIT_KEYS:
                break
            if key == SNAP_KEY and live:
                orchestrator.process(capture.snapshot())
            elif chr(key) in KEY_TO_REGION_MODE:
                orchestrator.change_region_mode(KEY_TO_REGION_MODE[chr(key)])
    finally:
        capture.release()
        detection_service.shutdown()
        sink.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
