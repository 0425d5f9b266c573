import math
from typing import Dict, List, Sequence

import config
from core.calculator import BendCalculator
from core.components import (
    DimensionLine, GeometryPath, HashMark, Mark, PathCommand, Point, Rect, Stroke,
)
from core.models import (
    BendKind, BendResult, Concentric, Offset, RollingOffset, Saddle3, Saddle4, Segmented,
)
from bending.paths import (
    arc_to_cubic, bounding_viewport, command_points, polyline, round_corners, sample_arc,
)

# Pipe centerline sits half a stroke plus a hair above the floor line
STROKE_CLEARANCE = config.STROKE_WIDTH / 2 + 1


def _fmt(value: float) -> str:
    return f"{value:.2f}"


def _num(value: float) -> str:
    return f"{value:g}"


def _straight_geometry(
    kind: BendKind,
    pts: Sequence[Point],
    obstacles: Sequence[Rect] = (),
    dimensions: Sequence[DimensionLine] = (),
    marks: Sequence[Mark] = (),
) -> GeometryPath:
    commands = round_corners(pts, config.ROUNDING_RADIUS)
    extent: List[Point] = command_points(commands)
    for rect in obstacles:
        extent.extend(rect.corners())
    for dim in dimensions:
        extent.extend((dim.start, dim.end))
    return GeometryPath(
        kind=kind,
        points=tuple(pts),
        strokes=(Stroke(tuple(pts), commands),),
        viewport=bounding_viewport(extent, config.PADDING_STRAIGHT),
        obstacles=tuple(obstacles),
        dimensions=tuple(dimensions),
        marks=tuple(marks),
    )


class OffsetCalculator(BendCalculator):
    kind = BendKind.OFFSET
    LEAD = 25.0
    TAIL = 45.0
    OBSTACLE_GAP = 5.0
    OBSTACLE_WIDTH = 35.0

    @staticmethod
    def shrinkage_half_angle_form(height: float, angle: float) -> float:
        """2h·sin²(a/2)/sin(a); algebraically equal to h·(1/cos(a) − 1)/tan(a)."""
        rad = math.radians(angle)
        return 2 * height * math.sin(rad / 2) ** 2 / math.sin(rad)

    def measure(self, spec: Offset) -> BendResult:
        rad = math.radians(spec.angle)
        h = spec.height
        return BendResult(
            kind=self.kind,
            travel=h / math.sin(rad),
            run=h / math.tan(rad),
            shrinkage=h * (1 / math.cos(rad) - 1) / math.tan(rad),
        )

    def layout(self, spec: Offset, result: BendResult) -> GeometryPath:
        h, run, b = spec.height, result.run, STROKE_CLEARANCE
        pts = [
            Point(0.0, b),
            Point(self.LEAD, b),
            Point(self.LEAD + run, h + b),
            Point(self.LEAD + run + self.TAIL, h + b),
        ]
        # Obstacle sits under the raised leg, just past the second bend
        obstacle = Rect(self.LEAD + run + self.OBSTACLE_GAP, 0.0, self.OBSTACLE_WIDTH, h)
        dim = DimensionLine(Point(self.LEAD, 0.0), Point(self.LEAD + run, 0.0), f'D: {_fmt(run)}"')
        marks = [Mark(pts[1], "1"), Mark(pts[2], "2")]
        return _straight_geometry(self.kind, pts, [obstacle], [dim], marks)

    def describe(self, spec: Offset, result: BendResult) -> str:
        return f'Offset Bend: Height {_num(spec.height)}", Angle {_num(spec.angle)}°, Travel {_fmt(result.travel)}"'


class Saddle3Calculator(BendCalculator):
    """Center bend of `angle`, two side bends of angle / 2."""
    kind = BendKind.SADDLE_3
    LEAD = 35.0
    OBSTACLE_WIDTH = 30.0

    def measure(self, spec: Saddle3) -> BendResult:
        half = math.radians(spec.angle) / 2
        h = spec.height
        center_to_side = h / math.sin(half)
        return BendResult(
            kind=self.kind,
            travel=center_to_side,
            run=h / math.tan(half),
            shrinkage=h * (1 - math.cos(half)) / math.sin(half),
            center_to_side=center_to_side,
        )

    def layout(self, spec: Saddle3, result: BendResult) -> GeometryPath:
        h, run, b = spec.height, result.run, STROKE_CLEARANCE
        pts = [
            Point(-run - self.LEAD, b),
            Point(-run, b),
            Point(0.0, h + b),
            Point(run, b),
            Point(run + self.LEAD, b),
        ]
        obstacle = Rect(-self.OBSTACLE_WIDTH / 2, 0.0, self.OBSTACLE_WIDTH, h)
        dim = DimensionLine(Point(-run, 0.0), Point(run, 0.0), f'Span: {_fmt(run * 2)}"')
        marks = [Mark(pts[1], "S"), Mark(pts[2], "C"), Mark(pts[3], "S")]
        return _straight_geometry(self.kind, pts, [obstacle], [dim], marks)

    def describe(self, spec: Saddle3, result: BendResult) -> str:
        return (
            f'3-Point Saddle: Obstacle {_num(spec.height)}", Angle {_num(spec.angle)}°, '
            f'Center to Side {_fmt(result.center_to_side)}"'
        )


class Saddle4Calculator(BendCalculator):
    kind = BendKind.SADDLE_4
    LEAD = 20.0
    DIM_RAISE = 15.0

    def measure(self, spec: Saddle4) -> BendResult:
        rad = math.radians(spec.angle)
        h = spec.height
        return BendResult(
            kind=self.kind,
            travel=h / math.sin(rad),
            run=h / math.tan(rad),
            shrinkage=2 * h * (1 - math.cos(rad)) / math.sin(rad),
        )

    def layout(self, spec: Saddle4, result: BendResult) -> GeometryPath:
        h, w, run, b = spec.height, spec.width, result.run, STROKE_CLEARANCE
        x0 = self.LEAD
        pts = [
            Point(0.0, b),
            Point(x0, b),
            Point(x0 + run, h + b),
            Point(x0 + run + w, h + b),
            Point(x0 + run + w + run, b),
            Point(x0 + run + w + run + self.LEAD, b),
        ]
        obstacle = Rect(x0 + run, 0.0, w, h)
        dim = DimensionLine(
            Point(x0 + run, h + self.DIM_RAISE), Point(x0 + run + w, h + self.DIM_RAISE), f'W: {_num(w)}"'
        )
        marks = [Mark(pts[i], str(i)) for i in range(1, 5)]
        return _straight_geometry(self.kind, pts, [obstacle], [dim], marks)

    def describe(self, spec: Saddle4, result: BendResult) -> str:
        return (
            f'4-Point Saddle: Height {_num(spec.height)}", Width {_num(spec.width)}", '
            f'Angle {_num(spec.angle)}°, Travel {_fmt(result.travel)}"'
        )


class RollingOffsetCalculator(BendCalculator):
    """Drawn in the plane of the true offset, with the rise/roll triangle beside it."""
    kind = BendKind.ROLLING_OFFSET
    LEAD = 25.0
    TAIL = 45.0
    TRIANGLE_GAP = 20.0

    def measure(self, spec: RollingOffset) -> BendResult:
        rad = math.radians(spec.angle)
        true_offset = math.sqrt(spec.rise ** 2 + spec.roll ** 2)
        return BendResult(
            kind=self.kind,
            travel=true_offset / math.sin(rad),
            run=true_offset / math.tan(rad),
            shrinkage=true_offset * (1 - math.cos(rad)) / math.sin(rad),
            true_offset=true_offset,
        )

    def layout(self, spec: RollingOffset, result: BendResult) -> GeometryPath:
        t, run, b = result.true_offset, result.run, STROKE_CLEARANCE
        pts = [
            Point(0.0, b),
            Point(self.LEAD, b),
            Point(self.LEAD + run, t + b),
            Point(self.LEAD + run + self.TAIL, t + b),
        ]
        # Roll along the floor, rise straight up, true offset as the hypotenuse
        x0 = pts[-1].x + self.TRIANGLE_GAP
        corner = Point(x0 + spec.roll, 0.0)
        apex = Point(x0 + spec.roll, spec.rise)
        dims = [
            DimensionLine(Point(self.LEAD, 0.0), Point(self.LEAD + run, 0.0), f'D: {_fmt(run)}"'),
            DimensionLine(Point(x0, 0.0), corner, f'ROLL: {_num(spec.roll)}"'),
            DimensionLine(corner, apex, f'RISE: {_num(spec.rise)}"'),
            DimensionLine(Point(x0, 0.0), apex, f'TRUE: {_fmt(t)}"'),
        ]
        marks = [Mark(pts[1], "1"), Mark(pts[2], "2")]
        return _straight_geometry(self.kind, pts, (), dims, marks)

    def describe(self, spec: RollingOffset, result: BendResult) -> str:
        return (
            f'Rolling Offset: Rise {_num(spec.rise)}", Roll {_num(spec.roll)}", '
            f'True Offset {_fmt(result.true_offset)}"'
        )


class ConcentricCalculator(BendCalculator):
    """
    Parallel pipes bent at one location. Pipe i sits i * spacing below the
    first and starts its bend i * stagger further along the run.
    """
    kind = BendKind.CONCENTRIC
    RUN_LENGTH = 2.0
    BEND_RADIUS = 1.0
    TAIL = 1.5
    DIM_GAP = 1.0

    def measure(self, spec: Concentric) -> BendResult:
        stagger = spec.spacing * math.tan(math.radians(spec.angle) / 2)
        return BendResult(kind=self.kind, shrinkage=stagger, stagger=stagger)

    def _pipe(self, index: int, spacing: float, stagger: float, angle: float) -> Stroke:
        rad = math.radians(angle)
        y = -index * spacing
        bend_start = Point(index * stagger + self.RUN_LENGTH, y)
        c1, c2, bend_end = arc_to_cubic(bend_start, self.BEND_RADIUS, angle)
        tail_end = Point(bend_end.x + self.TAIL * math.cos(rad), bend_end.y + self.TAIL * math.sin(rad))
        start = Point(0.0, y)
        commands = (
            PathCommand("M", (start,)),
            PathCommand("L", (bend_start,)),
            PathCommand("C", (c1, c2, bend_end)),
            PathCommand("L", (tail_end,)),
        )
        return Stroke((start, bend_start, bend_end, tail_end), commands)

    def layout(self, spec: Concentric, result: BendResult) -> GeometryPath:
        s, stagger = spec.spacing, result.stagger
        strokes = tuple(self._pipe(i, s, stagger, spec.angle) for i in range(spec.pipe_count))

        floor = -(spec.pipe_count - 1) * s - self.DIM_GAP
        dims = (
            DimensionLine(
                Point(self.RUN_LENGTH, floor), Point(self.RUN_LENGTH + stagger, floor), f'Stagger: {_fmt(stagger)}"'
            ),
            DimensionLine(Point(-self.DIM_GAP, 0.0), Point(-self.DIM_GAP, -s), f'S: {_num(s)}"'),
        )
        marks = tuple(Mark(stroke.vertices[1], str(i + 1)) for i, stroke in enumerate(strokes))

        extent: List[Point] = []
        for stroke in strokes:
            extent.extend(command_points(stroke.commands))
        for dim in dims:
            extent.extend((dim.start, dim.end))

        return GeometryPath(
            kind=self.kind,
            points=strokes[0].vertices,
            strokes=strokes,
            viewport=bounding_viewport(extent, config.PADDING_CONCENTRIC),
            dimensions=dims,
            marks=marks,
        )

    def describe(self, spec: Concentric, result: BendResult) -> str:
        return (
            f'Concentric: Spacing {_num(spec.spacing)}", {spec.pipe_count} Pipes, '
            f'Angle {_num(spec.angle)}°, Shrinkage {_fmt(result.stagger)}"'
        )


class SegmentedCalculator(BendCalculator):
    kind = BendKind.SEGMENTED

    def measure(self, spec: Segmented) -> BendResult:
        r, a = spec.radius, spec.angle
        arc = math.pi * r * a / 180
        chord = 2 * r * math.sin(math.radians(a) / 2)
        return BendResult(
            kind=self.kind,
            shrinkage=arc - chord,
            arc_length=arc,
            chord_length=chord,
            developed_length=arc,
            per_shot_angle=a / spec.shot_count,
        )

    def layout(self, spec: Segmented, result: BendResult) -> GeometryPath:
        samples = sample_arc(spec.radius, spec.angle, spec.shot_count)
        pts = tuple(p for p, _ in samples)
        hashes = tuple(HashMark(p, theta) for p, theta in samples)
        commands = polyline(pts)

        center = Point(0.0, spec.radius)
        mid = pts[len(pts) // 2]
        dim = DimensionLine(center, mid, f'R: {_num(spec.radius)}"')

        extent = list(pts)
        extent.extend((dim.start, dim.end))
        for mark in hashes:
            extent.extend(mark.endpoints(config.HASH_LENGTH))
        return GeometryPath(
            kind=self.kind,
            points=pts,
            strokes=(Stroke(pts, commands),),
            viewport=bounding_viewport(extent, config.PADDING_ARC),
            dimensions=(dim,),
            hash_marks=hashes,
        )

    def describe(self, spec: Segmented, result: BendResult) -> str:
        return (
            f'Segment Bend: {spec.shot_count} Shots, Radius {_num(spec.radius)}", '
            f'Angle {_num(spec.angle)}°, Dev Length {_fmt(result.developed_length)}"'
        )


CALCULATORS: Dict[BendKind, BendCalculator] = {
    calc.kind: calc
    for calc in (
        OffsetCalculator(),
        Saddle3Calculator(),
        Saddle4Calculator(),
        RollingOffsetCalculator(),
        ConcentricCalculator(),
        SegmentedCalculator(),
    )
}
