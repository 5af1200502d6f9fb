"""
Frame orchestrator
Runs every configured effect on one captured frame, in stage order, and
routes each result to its display slot.
"""
from __future__ import annotations
import itertools
import logging
from concurrent.futures import Future
from typing import Dict, Mapping, Optional

from models.detection_result import DetectionResult, DetectionStatus
from models.effect_config import (
    DEFAULT_EFFECTS,
    ORIGINAL_SLOT,
    STAGE_ORDER,
    EffectConfig,
    EffectKind,
    RegionMode,
)
from models.frame_context import FrameContext
from models.pixel_buffer import PixelBuffer
from services.display_service import DisplayService
from services.filter_service import FilterService
from services.overlay_service import OverlayService
from services.parameter_service import ParameterService
from services.region_detection_service import RegionDetectionService
from services.region_effect_service import RegionEffectService
from services.threshold_service import ThresholdService

logger = logging.getLogger(__name__)

FULL_FRAME_SOURCES = (EffectKind.HSV, EffectKind.LAB)


def validate_layout(effects: Mapping[str, EffectConfig]) -> None:
    """
    Raises ValueError unless the layout runs its stages in order, writes every
    slot once and renders each derived threshold's source before it.
    """
    seen: Dict[str, EffectConfig] = {}
    slots = {ORIGINAL_SLOT}
    last_stage = 0
    for name, cfg in effects.items():
        stage = STAGE_ORDER[cfg.kind]
        if stage < last_stage:
            raise ValueError(f"Effect '{name}' ({cfg.kind.value}) is out of stage order")
        last_stage = stage

        if cfg.slot in slots:
            raise ValueError(f"Slot '{cfg.slot}' is written by more than one effect")
        slots.add(cfg.slot)

        if cfg.kind in (EffectKind.CHANNEL, EffectKind.CHANNEL_THRESHOLD):
            if cfg.params.get("channel") not in (0, 1, 2):
                raise ValueError(f"Effect '{name}' needs a channel of 0, 1 or 2")
        if cfg.kind is EffectKind.DERIVED_THRESHOLD:
            source = seen.get(cfg.params.get("source"))
            if source is None or source.kind not in FULL_FRAME_SOURCES:
                raise ValueError(f"Effect '{name}' must come after its HSV/Lab source "
                                 f"'{cfg.params.get('source')}'")
        seen[name] = cfg


class FrameOrchestrator:
    """
    Owns the current FrameContext. A new capture replaces it; results that
    belong to an older frame are dropped.
    """

    def __init__(
        self,
        display_service: DisplayService,
        detection_service: RegionDetectionService,
        *,
        parameter_service: ParameterService | None = None,
        effects: Mapping[str, EffectConfig] = DEFAULT_EFFECTS,
        filter_service: FilterService | None = None,
        threshold_service: ThresholdService | None = None,
        region_effect_service: RegionEffectService | None = None,
        overlay_service: OverlayService | None = None,
    ):
        validate_layout(effects)
        self.effects = dict(effects)
        self.display_service = display_service
        self.detection_service = detection_service
        self.parameter_service = parameter_service or ParameterService(
            name for name, cfg in self.effects.items() if cfg.is_threshold)
        self.filter_service = filter_service or FilterService()
        self.threshold_service = threshold_service or ThresholdService()
        self.region_effect_service = region_effect_service or RegionEffectService()
        self.overlay_service = overlay_service or OverlayService()

        self.current: Optional[FrameContext] = None
        self._frame_ids = itertools.count(1)

    # ─── Public API ────────────────────────────────────────────────
    def process(self, base: PixelBuffer | None) -> Optional[FrameContext]:
        """
        Run the whole layout on a freshly captured base buffer.
        Without a base buffer nothing happens.
        """
        if base is None:
            logger.debug("No base buffer, nothing to process")
            return None

        context = FrameContext(frame_id=next(self._frame_ids), base=base)
        self.current = context
        logger.info(f"Frame {context.frame_id}: processing {base.width}x{base.height}")
        self.display_service.show(ORIGINAL_SLOT, base)

        # Detection runs while the full-frame filters render.
        pending: Future | None = None
        if any(cfg.kind is EffectKind.REGIONS for cfg in self.effects.values()):
            pending = self.detection_service.submit(context.frame_id, base)

        for name, cfg in self.effects.items():
            if cfg.kind is EffectKind.REGIONS and context.detection is None:
                result = self.detection_service.wait(pending, context.frame_id)
                if not self.accept_detection(context, result):
                    return context
            self._render(context, name)

        logger.info(f"Frame {context.frame_id}: {len(context.outputs)} slot(s) rendered")
        return context

    def accept_detection(self, context: FrameContext, result: DetectionResult) -> bool:
        """Attach a detection result to its frame unless a newer capture superseded it."""
        # process() waits in line, so this only rejects results delivered out of
        # band, such as the late answer of a job abandoned after a timeout.
        if context is not self.current or result.frame_id != context.frame_id:
            logger.warning(f"Discarding stale detection for frame {result.frame_id}")
            return False
        context.detection = result
        return True

    def refresh_threshold(self, effect_name: str) -> Optional[PixelBuffer]:
        """Re-render one threshold slot after its parameter changed."""
        cfg = self.effects.get(effect_name)
        if cfg is None or not cfg.is_threshold:
            raise ValueError(f"'{effect_name}' is not a threshold effect")
        if self.current is None:
            return None
        return self._render(self.current, effect_name)

    def change_region_mode(self, mode: RegionMode) -> bool:
        """
        Switch the region effect and re-render from the cached detection.
        Ignored while the current frame has no detected regions.
        """
        context = self.current
        if context is None or context.detection is None or not context.detection.regions:
            return False
        self.parameter_service.set_region_mode(mode)
        for name, cfg in self.effects.items():
            if cfg.kind is EffectKind.REGIONS:
                self._render(context, name)
        return True

    # ─── Rendering ─────────────────────────────────────────────────
    def _render(self, context: FrameContext, name: str) -> PixelBuffer:
        cfg = self.effects[name]
        output = self._compute(context, name, cfg)
        context.outputs[name] = output
        self.display_service.show(cfg.slot, output)
        return output

    def _compute(self, context: FrameContext, name: str, cfg: EffectConfig) -> PixelBuffer:
        base = context.base
        kind = cfg.kind
        if kind is EffectKind.GRAYSCALE:
            return self.filter_service.grayscale(base)
        if kind is EffectKind.XRAY:
            return self.filter_service.xray(base)
        if kind is EffectKind.CHANNEL:
            return self.filter_service.isolate_channel(base, cfg.params["channel"])
        if kind is EffectKind.HSV:
            return self.filter_service.hsv_false_color(base)
        if kind is EffectKind.LAB:
            return self.filter_service.lab_false_color(base)
        if kind is EffectKind.CHANNEL_THRESHOLD:
            return self.threshold_service.channel_threshold(
                base, cfg.params["channel"], self.parameter_service.threshold_for(name))
        if kind is EffectKind.DERIVED_THRESHOLD:
            source = context.output(cfg.params["source"])
            return self.threshold_service.luminance_threshold(
                source, self.parameter_service.threshold_for(name))
        if kind is EffectKind.REGIONS:
            return self._compute_regions(context)
        raise ValueError(f"Unknown effect kind: {kind}")

    def _compute_regions(self, context: FrameContext) -> PixelBuffer:
        base, detection = context.base, context.detection
        if detection is None or detection.status is DetectionStatus.NOT_READY:
            return self.overlay_service.loading(base)
        if detection.status is DetectionStatus.ERROR:
            return self.overlay_service.error(base)
        if not detection.regions:
            return self.overlay_service.no_regions(base)

        mode = self.parameter_service.region_mode()
        if mode is RegionMode.OUTLINE:
            return self.overlay_service.outline(base, detection.regions)
        return self.region_effect_service.apply(base, detection.regions, mode)
