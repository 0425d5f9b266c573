"""
Field advisories layered on top of the bend math: angle suggestions,
springback targets, stick-length and clearance warnings, minimum radius
checks, the degrees-between-pull-points budget and the digital level readout.
"""

import logging
import math
from dataclasses import dataclass, replace
from typing import List, Tuple, Union

import config
from core.converters import format_decimal, parse_trade_size, validate_angle
from core.models import (
    AngleMode, BendKind, BendSpec, BendWarning, ConduitType, LevelStatus, Offset, Saddle3, Saddle4,
    Segmented, Severity,
)
from standards.nec_tables import get_min_bend_radius, get_springback_factor

logger = logging.getLogger(__name__)

TradeSize = Union[str, float, int]

# Height breakpoints (inches) -> suggested angle, checked in order
ANGLE_BREAKPOINTS = (
    (2.0, 10.0),
    (5.0, 22.5),
    (12.0, 30.0),
    (24.0, 45.0),
)
TALL_OFFSET_ANGLE = 60.0
LARGE_CONDUIT_SIZE = 1.25
LARGE_CONDUIT_ANGLE = 30.0

STICK_TRAVEL_KINDS = (BendKind.OFFSET, BendKind.SADDLE_3, BendKind.SADDLE_4)


def suggest_angle(height: float, trade_size: TradeSize) -> float:
    """Bigger conduit always gets 30°; otherwise the angle steps up with the height."""
    if parse_trade_size(trade_size) > LARGE_CONDUIT_SIZE:
        return LARGE_CONDUIT_ANGLE
    for limit, angle in ANGLE_BREAKPOINTS:
        if height <= limit:
            return angle
    return TALL_OFFSET_ANGLE


@dataclass(frozen=True)
class AngleSelection:
    """
    The angle picker. In AUTO mode the angle follows suggest_angle(); touching
    the angle switches to MANUAL, and a later change of height or trade size
    switches back to AUTO.
    """
    angle: float
    mode: AngleMode
    height: float
    trade_size: TradeSize

    @classmethod
    def auto(cls, height: float, trade_size: TradeSize) -> "AngleSelection":
        return cls(suggest_angle(height, trade_size), AngleMode.AUTO, height, trade_size)

    def with_manual_angle(self, angle: float) -> "AngleSelection":
        return replace(self, angle=validate_angle(angle), mode=AngleMode.MANUAL)

    def with_height(self, height: float) -> "AngleSelection":
        if height == self.height:
            return self
        return AngleSelection.auto(height, self.trade_size)

    def with_trade_size(self, trade_size: TradeSize) -> "AngleSelection":
        if parse_trade_size(trade_size) == parse_trade_size(self.trade_size):
            return self
        return AngleSelection.auto(self.height, trade_size)

    @property
    def is_auto(self) -> bool:
        return self.mode is AngleMode.AUTO


def springback_target(angle: float, material: ConduitType, kind: BendKind, shot_count: int = 1) -> float:
    effective = angle / shot_count if kind is BendKind.SEGMENTED else angle
    return effective * (1 + get_springback_factor(material))


def springback_label(kind: BendKind) -> str:
    return "Per Shot Target" if kind is BendKind.SEGMENTED else "Springback Target"


def bend_warnings(spec: BendSpec) -> List[BendWarning]:
    warnings: List[BendWarning] = []
    if not isinstance(spec, (Offset, Saddle3, Saddle4)):
        return warnings

    travel = spec.height / math.sin(math.radians(spec.angle))
    if travel > config.MAX_STICK_TRAVEL:
        warnings.append(BendWarning(Severity.ERROR, 'Error: Offset too long for a single 10ft stick (>110").'))
    if spec.height > config.FLOOR_BENDER_CLEARANCE:
        warnings.append(BendWarning(Severity.WARNING, 'Warning: May exceed floor bender clearance (>22").'))

    if warnings:
        logger.info("%s h=%g a=%g: %d advisories", spec.kind.value, spec.height, spec.angle, len(warnings))
    return warnings


def radius_warnings(spec: BendSpec, trade_size: TradeSize) -> List[BendWarning]:
    """Segmented bends tighter than the minimum radius for the conduit size."""
    if not isinstance(spec, Segmented):
        return []
    minimum = get_min_bend_radius(trade_size)
    if spec.radius < minimum:
        return [BendWarning(Severity.ERROR, f'Violation: Min radius for {trade_size}" is {minimum:g}".')]
    return []


@dataclass(frozen=True)
class PullRun:
    """Degrees of bend accumulated since the last pull point."""
    bends: Tuple[float, ...] = ()

    @property
    def total(self) -> float:
        return sum(self.bends)

    def add(self, angle: float) -> "PullRun":
        return PullRun(self.bends + (validate_angle(angle),))

    def reset(self) -> "PullRun":
        return PullRun()

    def remaining(self) -> float:
        return max(0.0, config.MAX_DEGREES_BETWEEN_PULLS - self.total)

    def warnings(self, next_angle: float = 0.0) -> List[BendWarning]:
        projected = self.total + next_angle
        if projected > config.MAX_DEGREES_BETWEEN_PULLS:
            return [BendWarning(
                Severity.ERROR,
                f"Cannot exceed 360° between pull points (Current: {projected:g}°).",
            )]
        return []


def level_status(tilt: float, target: float) -> LevelStatus:
    """Grades a device tilt reading (degrees, either sign) against the bend target."""
    off = abs(abs(tilt) - target)
    if off < config.LEVEL_EXACT_TOLERANCE:
        return LevelStatus.EXACT
    if off < config.LEVEL_CLOSE_TOLERANCE:
        return LevelStatus.CLOSE
    return LevelStatus.OFF


def springback_summary(angle: float, material: ConduitType, kind: BendKind, shot_count: int = 1) -> str:
    target = springback_target(angle, material, kind, shot_count)
    return f"{springback_label(kind)} ({material.value}): {format_decimal(target)}°"
