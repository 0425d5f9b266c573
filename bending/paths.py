"""Curve and layout helpers shared by every bend shape's drawing."""

import math
from html import escape
from typing import Iterable, List, Sequence, Tuple

import config
from core.components import GeometryPath, PathCommand, Point, Viewport

# Rounded corners never take more than 1/2.2 of either neighbouring segment
SEGMENT_SHARE = 2.2
ZERO_LENGTH = 1e-9

# Stroke and text sizes are relative to a view this many units across
VIEW_UNITS = 250.0
FONT_SIZE = 9.0


def round_corners(points: Sequence[Point], radius: float = 15.0) -> Tuple[PathCommand, ...]:
    """
    Replaces every interior vertex of a polyline with a quadratic blend.

    The blend radius at a vertex is min(radius, prev/2.2, next/2.2), so two
    neighbouring blends can never meet or run past the middle of a segment.
    Output is M, then an L (straight) + Q (curve) pair per interior vertex,
    then a final L to the last point.
    """
    if len(points) < 2:
        return ()

    commands: List[PathCommand] = [PathCommand("M", (points[0],))]
    for i in range(1, len(points) - 1):
        p0, p1, p2 = points[i - 1], points[i], points[i + 1]
        v1, v2 = p0 - p1, p2 - p1
        l1, l2 = v1.length(), v2.length()
        if l1 < ZERO_LENGTH or l2 < ZERO_LENGTH:
            commands.append(PathCommand("L", (p1,)))
            continue

        r = min(radius, l1 / SEGMENT_SHARE, l2 / SEGMENT_SHARE)
        u1, u2 = v1.scale(1 / l1), v2.scale(1 / l2)
        commands.append(PathCommand("L", (p1 + u1.scale(r),)))
        commands.append(PathCommand("Q", (p1, p1 + u2.scale(r))))

    commands.append(PathCommand("L", (points[-1],)))
    return tuple(commands)


def polyline(points: Sequence[Point]) -> Tuple[PathCommand, ...]:
    if not points:
        return ()
    return (PathCommand("M", (points[0],)),) + tuple(PathCommand("L", (p,)) for p in points[1:])


def arc_control_distance(radius: float, angle_deg: float) -> float:
    """Standard circular-arc-to-cubic-Bezier handle length: R * 4/3 * tan(angle / 4)."""
    return radius * (4.0 / 3.0) * math.tan(math.radians(angle_deg) / 4.0)


def arc_to_cubic(start: Point, radius: float, angle_deg: float) -> Tuple[Point, Point, Point]:
    """
    Cubic Bezier for an arc that leaves `start` heading +x and turns toward +y.
    Returns (control_1, control_2, end).
    """
    rad = math.radians(angle_deg)
    f = arc_control_distance(radius, angle_deg)
    end = Point(start.x + radius * math.sin(rad), start.y + radius * (1 - math.cos(rad)))
    c1 = Point(start.x + f, start.y)
    c2 = Point(end.x - f * math.cos(rad), end.y - f * math.sin(rad))
    return c1, c2, end


def sample_arc(radius: float, angle_deg: float, steps: int) -> List[Tuple[Point, float]]:
    """
    Samples steps + 1 points at equal angular spacing on an arc starting at the
    origin heading +x. Each point is paired with its tangent angle in radians.
    """
    step = math.radians(angle_deg) / steps
    samples = []
    for i in range(steps + 1):
        theta = i * step
        samples.append((Point(radius * math.sin(theta), radius - radius * math.cos(theta)), theta))
    return samples


def command_points(commands: Iterable[PathCommand]) -> List[Point]:
    pts: List[Point] = []
    for cmd in commands:
        pts.extend(cmd.points)
    return pts


def bounding_viewport(points: Sequence[Point], padding: float) -> Viewport:
    """Bounding box of the points grown by `padding` on every side."""
    if not points:
        return Viewport(0.0, 0.0, 100.0, 100.0)
    min_x = min(p.x for p in points)
    max_x = max(p.x for p in points)
    min_y = min(p.y for p in points)
    max_y = max(p.y for p in points)
    return Viewport(
        min_x=min_x - padding,
        min_y=min_y - padding,
        width=(max_x - min_x) + padding * 2,
        height=(max_y - min_y) + padding * 2,
    )


def path_data(commands: Iterable[PathCommand], precision: int = 2) -> str:
    """SVG path data for the commands. Y is negated because SVG is y-down."""
    parts = []
    for cmd in commands:
        coords = " ".join(f"{p.x:.{precision}f} {0.0 - p.y:.{precision}f}" for p in cmd.points)
        parts.append(f"{cmd.op} {coords}")
    return " ".join(parts)


def render_svg(
    geometry: GeometryPath,
    pipe_color: str = "#3b82f6",
    obstacle_color: str = "#475569",
    label_color: str = "#94a3b8",
) -> str:
    """
    Standalone <svg> document for a bend layout. Stroke width and text size
    scale with the viewport so small layouts (concentric) stay legible.
    """
    vp = geometry.viewport
    unit = max(vp.width, vp.height) / VIEW_UNITS
    stroke = config.STROKE_WIDTH * unit
    font = FONT_SIZE * unit

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="{vp.to_svg_viewbox()}" '
        f'width="100%" preserveAspectRatio="xMidYMid meet">'
    ]
    for rect in geometry.obstacles:
        parts.append(
            f'<rect x="{rect.x:.2f}" y="{-(rect.y + rect.height):.2f}" width="{rect.width:.2f}" '
            f'height="{rect.height:.2f}" fill="{obstacle_color}" opacity="0.6"/>'
        )
    for s in geometry.strokes:
        parts.append(
            f'<path d="{path_data(s.commands)}" fill="none" stroke="{pipe_color}" '
            f'stroke-width="{stroke:.2f}" stroke-linecap="round" stroke-linejoin="round"/>'
        )
    for mark in geometry.hash_marks:
        a, b = mark.endpoints(config.HASH_LENGTH)
        parts.append(
            f'<line x1="{a.x:.2f}" y1="{-a.y:.2f}" x2="{b.x:.2f}" y2="{-b.y:.2f}" '
            f'stroke="{label_color}" stroke-width="{stroke / 3:.2f}"/>'
        )
    for dim in geometry.dimensions:
        mid = dim.midpoint
        parts.append(
            f'<line x1="{dim.start.x:.2f}" y1="{-dim.start.y:.2f}" x2="{dim.end.x:.2f}" y2="{-dim.end.y:.2f}" '
            f'stroke="{label_color}" stroke-width="{stroke / 4:.2f}" stroke-dasharray="{stroke:.2f}"/>'
        )
        parts.append(
            f'<text x="{mid.x:.2f}" y="{-mid.y - font / 2:.2f}" font-size="{font:.2f}" '
            f'fill="{label_color}" text-anchor="middle">{escape(dim.label)}</text>'
        )
    for mark in geometry.marks:
        p = mark.point
        parts.append(f'<circle cx="{p.x:.2f}" cy="{-p.y:.2f}" r="{stroke:.2f}" fill="{label_color}"/>')
        parts.append(
            f'<text x="{p.x:.2f}" y="{-p.y - stroke * 2:.2f}" font-size="{font:.2f}" '
            f'fill="{label_color}" text-anchor="middle">{escape(mark.label)}</text>'
        )
    parts.append("</svg>")
    return "".join(parts)
