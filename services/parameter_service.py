from __future__ import annotations
import logging
import os
from typing import Dict, Iterable
from dotenv import load_dotenv
from models.effect_config import RegionMode
from services.threshold_service import ThresholdService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ParameterService:
    """
    Holds the user-controlled parameters: one threshold per threshold effect
    and the active region mode. Read synchronously by the orchestrator.
    """

    def __init__(self, threshold_effects: Iterable[str] = (), region_mode: RegionMode | None = None):
        default = ThresholdService.validate_threshold(int(os.getenv("DEFAULT_THRESHOLD", "127")))
        self._thresholds: Dict[str, int] = {name: default for name in threshold_effects}
        self.default_threshold = default
        self._region_mode = region_mode or RegionMode(os.getenv("DEFAULT_REGION_MODE", RegionMode.OUTLINE.value))

    def threshold_for(self, effect_name: str) -> int:
        return self._thresholds.get(effect_name, self.default_threshold)

    def set_threshold(self, effect_name: str, value: int) -> None:
        self._thresholds[effect_name] = ThresholdService.validate_threshold(value)

    def region_mode(self) -> RegionMode:
        return self._region_mode

    def set_region_mode(self, mode: RegionMode) -> None:
        logger.info(f"Region mode → {mode.value}")
        self._region_mode = mode
