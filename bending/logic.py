import logging
from functools import lru_cache
from typing import Optional

import config
from core.components import GeometryPath
from core.models import BendResult, BendSpec
from bending.shapes import CALCULATORS

logger = logging.getLogger(__name__)


class BendLogic:
    """Dispatches each BendSpec variant to its shape calculator. Results are memoised per input value."""

    @staticmethod
    def calculator_for(spec: BendSpec):
        try:
            return CALCULATORS[spec.kind]
        except (AttributeError, KeyError):
            raise TypeError(f"Not a bend spec: {spec!r}") from None

    @staticmethod
    @lru_cache(maxsize=config.MEMO_SIZE)
    def compute_bend(spec: BendSpec) -> BendResult:
        result = BendLogic.calculator_for(spec).measure(spec)
        logger.debug("compute_bend %r -> %r", spec, result)
        return result

    @staticmethod
    @lru_cache(maxsize=config.MEMO_SIZE)
    def synthesize(spec: BendSpec) -> GeometryPath:
        result = BendLogic.compute_bend(spec)
        geometry = BendLogic.calculator_for(spec).layout(spec, result)
        logger.debug(
            "synthesize %s: %d strokes, viewport %s", spec.kind.value, len(geometry.strokes), geometry.viewport
        )
        return geometry

    @staticmethod
    def describe(spec: BendSpec, result: Optional[BendResult] = None) -> str:
        if result is None:
            result = BendLogic.compute_bend(spec)
        return BendLogic.calculator_for(spec).describe(spec, result)
