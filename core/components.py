import math
from dataclasses import dataclass
from typing import Optional, Tuple

from core.models import BendKind


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def scale(self, k: float) -> "Point":
        return Point(self.x * k, self.y * k)

    def length(self) -> float:
        return math.hypot(self.x, self.y)


@dataclass(frozen=True)
class PathCommand:
    """One drawing instruction: 'M' move, 'L' line, 'Q' quadratic, 'C' cubic."""
    op: str
    points: Tuple[Point, ...]

    @property
    def end(self) -> Point:
        return self.points[-1]


@dataclass(frozen=True)
class Stroke:
    """A single drawn conduit: its centerline vertices and the commands that draw it."""
    vertices: Tuple[Point, ...]
    commands: Tuple[PathCommand, ...]


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    def corners(self) -> Tuple[Point, ...]:
        return (
            Point(self.x, self.y),
            Point(self.x + self.width, self.y),
            Point(self.x + self.width, self.y + self.height),
            Point(self.x, self.y + self.height),
        )


@dataclass(frozen=True)
class DimensionLine:
    start: Point
    end: Point
    label: str

    @property
    def midpoint(self) -> Point:
        return Point((self.start.x + self.end.x) / 2, (self.start.y + self.end.y) / 2)


@dataclass(frozen=True)
class Mark:
    point: Point
    label: str


@dataclass(frozen=True)
class HashMark:
    """A shot position on a segmented bend; tangent_angle is in radians."""
    point: Point
    tangent_angle: float

    def endpoints(self, length: float) -> Tuple[Point, Point]:
        # Perpendicular to the local tangent
        nx, ny = -math.sin(self.tangent_angle), math.cos(self.tangent_angle)
        return (
            Point(self.point.x - nx * length, self.point.y - ny * length),
            Point(self.point.x + nx * length, self.point.y + ny * length),
        )


@dataclass(frozen=True)
class Viewport:
    min_x: float
    min_y: float
    width: float
    height: float

    def to_svg_viewbox(self) -> str:
        # Engine coordinates are y-up; SVG is y-down
        top = -(self.min_y + self.height)
        return f"{self.min_x:.2f} {top:.2f} {self.width:.2f} {self.height:.2f}"


@dataclass(frozen=True)
class GeometryPath:
    kind: BendKind
    points: Tuple[Point, ...]
    strokes: Tuple[Stroke, ...]
    viewport: Viewport
    obstacles: Tuple[Rect, ...] = ()
    dimensions: Tuple[DimensionLine, ...] = ()
    marks: Tuple[Mark, ...] = ()
    hash_marks: Tuple[HashMark, ...] = ()


@dataclass(frozen=True)
class FillGauge:
    """Render hints for the fill screens: circle radius or bar ratio plus the verdict."""
    percent: float
    ratio: float
    over_limit: bool
    fill_radius: Optional[float] = None
    outer_radius: Optional[float] = None
