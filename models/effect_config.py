from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class EffectKind(Enum):
    GRAYSCALE = "grayscale"
    XRAY = "xray"
    CHANNEL = "channel"
    HSV = "hsv"
    LAB = "lab"
    CHANNEL_THRESHOLD = "channel_threshold"
    DERIVED_THRESHOLD = "derived_threshold"
    REGIONS = "regions"


class RegionMode(Enum):
    OUTLINE = "outline"      # draw the detected boxes only
    GRAYSCALE = "grayscale"
    BLUR = "blur"
    HSV = "hsv"
    PIXELATE = "pixelate"


# Keyboard shortcuts of the interactive app.
KEY_TO_REGION_MODE: Dict[str, RegionMode] = {
    "1": RegionMode.GRAYSCALE,
    "2": RegionMode.BLUR,
    "3": RegionMode.HSV,
    "4": RegionMode.PIXELATE,
    "5": RegionMode.OUTLINE,
}


@dataclass(frozen=True)
class EffectConfig:
    """
    One output slot: which effect renders it and with what parameters.

    params by kind:
        CHANNEL / CHANNEL_THRESHOLD -> {"channel": 0 | 1 | 2}
        DERIVED_THRESHOLD           -> {"source": <name of an HSV or LAB effect>}
    """
    kind: EffectKind
    slot: str
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_threshold(self) -> bool:
        return self.kind in (EffectKind.CHANNEL_THRESHOLD, EffectKind.DERIVED_THRESHOLD)


ORIGINAL_SLOT = "slot1"

# Reference layout. Insertion order is the invocation order.
DEFAULT_EFFECTS: Dict[str, EffectConfig] = {
    "grayscale": EffectConfig(EffectKind.GRAYSCALE, "slot2"),
    "xray": EffectConfig(EffectKind.XRAY, "slot3"),
    "red": EffectConfig(EffectKind.CHANNEL, "slot4", {"channel": 0}),
    "green": EffectConfig(EffectKind.CHANNEL, "slot5", {"channel": 1}),
    "blue": EffectConfig(EffectKind.CHANNEL, "slot6", {"channel": 2}),
    "hsv": EffectConfig(EffectKind.HSV, "slot11"),
    "lab": EffectConfig(EffectKind.LAB, "slot12"),
    "red_threshold": EffectConfig(EffectKind.CHANNEL_THRESHOLD, "slot7", {"channel": 0}),
    "green_threshold": EffectConfig(EffectKind.CHANNEL_THRESHOLD, "slot8", {"channel": 1}),
    "blue_threshold": EffectConfig(EffectKind.CHANNEL_THRESHOLD, "slot9", {"channel": 2}),
    "hsv_threshold": EffectConfig(EffectKind.DERIVED_THRESHOLD, "slot14", {"source": "hsv"}),
    "lab_threshold": EffectConfig(EffectKind.DERIVED_THRESHOLD, "slot15", {"source": "lab"}),
    "regions": EffectConfig(EffectKind.REGIONS, "slot13"),
}

# Every kind belongs to one stage; stages run in this order.
STAGE_ORDER = {
    EffectKind.GRAYSCALE: 0,
    EffectKind.XRAY: 0,
    EffectKind.CHANNEL: 0,
    EffectKind.HSV: 0,
    EffectKind.LAB: 0,
    EffectKind.CHANNEL_THRESHOLD: 1,
    EffectKind.DERIVED_THRESHOLD: 2,
    EffectKind.REGIONS: 3,
}
