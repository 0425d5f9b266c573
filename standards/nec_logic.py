import logging
import math

from core.components import FillGauge
from core.models import (
    BoxFillInput, BoxFillResult, ConduitFillInput, ConduitFillResult,
    DetailedBoxFillInput, DetailedBoxFillResult,
)
from standards.nec_tables import (
    BOX_FILL_12, BOX_FILL_14, BOX_FILL_DEVICE, NIPPLE_MAX_LENGTH,
    get_box_capacity, get_conduit_area, get_fill_limit, get_wire_area, get_wire_volume,
)

logger = logging.getLogger(__name__)

# Radius of the drawn conduit cross-section on the fill screen
GAUGE_OUTER_RADIUS = 60.0
# Ground allowance: one conductor for up to four grounds, 1/4 per ground after that
GROUNDS_INCLUDED = 4
EXTRA_GROUND_FRACTION = 0.25


class NECLogic:
    @staticmethod
    def allowed_fill_percent(conductor_count: int, is_nipple: bool = False) -> float:
        # NEC Chapter 9 Table 1: 1 wire 53%, 2 wires 31%, over 2 wires 40%
        return get_fill_limit(conductor_count, is_nipple)

    @staticmethod
    def conduit_fill(fill: ConduitFillInput) -> ConduitFillResult:
        total_area = 0.0
        for conductor in fill.conductors:
            total_area += get_wire_area(conductor.gauge, fill.insulation) * conductor.count

        internal_area = get_conduit_area(fill.conduit_type, fill.conduit_size)
        fill_percent = total_area / internal_area * 100.0

        count = fill.conductor_count
        is_nipple = fill.conduit_length is not None and fill.conduit_length <= NIPPLE_MAX_LENGTH
        max_percent = NECLogic.allowed_fill_percent(count, is_nipple)

        logger.debug(
            "Conduit fill %s %s: %d conductors, %.4f/%.3f in² = %.2f%% (limit %.0f%%)",
            fill.conduit_type.value, fill.conduit_size, count, total_area, internal_area, fill_percent, max_percent,
        )

        return ConduitFillResult(
            total_conductor_area=total_area,
            conduit_internal_area=internal_area,
            fill_percent=fill_percent,
            max_allowed_percent=max_percent,
            max_allowed_area=internal_area * max_percent / 100.0,
            conductor_count=count,
            is_nipple=is_nipple,
            compliant=fill_percent <= max_percent,
        )

    @staticmethod
    def box_fill(box: BoxFillInput) -> BoxFillResult:
        # Fixed device allowance (4.5 in³ per yoke) regardless of conductor size
        used = box.count_14 * BOX_FILL_14 + box.count_12 * BOX_FILL_12 + box.device_count * BOX_FILL_DEVICE
        capacity = get_box_capacity(box.box_type)
        logger.debug("Box fill %s: %.2f / %.2f in³", box.box_type.value, used, capacity)
        return BoxFillResult(volume_used=used, capacity=capacity, compliant=used <= capacity)

    @staticmethod
    def box_fill_detailed(box: DetailedBoxFillInput) -> DetailedBoxFillResult:
        """
        NEC 314.16(B) style count: devices take two allowances of the largest
        conductor, clamps one, support fittings one each, grounds one plus a
        quarter for every ground past the fourth.
        """
        conductor_volume = 0.0
        largest = None
        largest_vol = 0.0
        for conductor in box.conductors:
            vol = get_wire_volume(conductor.gauge)
            conductor_volume += vol * conductor.count
            if conductor.count > 0 and vol > largest_vol:
                largest, largest_vol = conductor.gauge, vol

        if largest is None:
            # No conductors entered: size allowances on #14
            largest, largest_vol = "14", get_wire_volume("14")

        device_volume = box.device_count * 2 * largest_vol
        clamp_volume = largest_vol if box.has_clamps else 0.0
        support_volume = box.support_fittings * largest_vol

        ground_volume = 0.0
        if box.ground_count > 0:
            ground_unit = get_wire_volume(box.largest_ground_gauge)
            ground_volume = ground_unit
            if box.ground_count > GROUNDS_INCLUDED:
                ground_volume += (box.ground_count - GROUNDS_INCLUDED) * ground_unit * EXTRA_GROUND_FRACTION

        used = conductor_volume + device_volume + clamp_volume + ground_volume + support_volume
        capacity = get_box_capacity(box.box_type)

        return DetailedBoxFillResult(
            conductor_volume=conductor_volume,
            device_volume=device_volume,
            clamp_volume=clamp_volume,
            ground_volume=ground_volume,
            support_volume=support_volume,
            volume_used=used,
            capacity=capacity,
            largest_conductor=largest,
            compliant=used <= capacity,
        )

    @staticmethod
    def conduit_gauge(result: ConduitFillResult) -> FillGauge:
        shown = min(max(result.fill_percent, 0.0), 100.0)
        return FillGauge(
            percent=result.fill_percent,
            ratio=shown / 100.0,
            over_limit=not result.compliant,
            fill_radius=GAUGE_OUTER_RADIUS * math.sqrt(shown / 100.0),
            outer_radius=GAUGE_OUTER_RADIUS,
        )

    @staticmethod
    def box_gauge(result) -> FillGauge:
        """Works for both BoxFillResult and DetailedBoxFillResult."""
        ratio = result.volume_used / result.capacity
        return FillGauge(
            percent=ratio * 100.0,
            ratio=min(1.0, ratio),
            over_limit=not result.compliant,
        )
