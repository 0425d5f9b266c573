from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Tuple

from core.converters import validate_angle, validate_count, validate_length
from core.errors import InvalidParameterError


class BendKind(Enum):
    OFFSET = "offset"
    SADDLE_3 = "saddle3"
    SADDLE_4 = "saddle4"
    ROLLING_OFFSET = "roll"
    CONCENTRIC = "parallel"
    SEGMENTED = "segmented"


class ConduitType(Enum):
    EMT = "EMT"
    IMC = "IMC"
    RMC = "RMC"


class Insulation(Enum):
    THHN = "THHN"
    XHHW = "XHHW"


class BoxType(Enum):
    SQUARE_4X1_1_2 = "4x1-1/2 Sq"
    SQUARE_4X2_1_8 = "4x2-1/8 Sq"
    SQUARE_4_11_16 = "4-11/16 Sq"
    HANDY_BOX = "Handy Box"


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


class AngleMode(Enum):
    AUTO = "auto"
    MANUAL = "manual"


class LevelStatus(Enum):
    EXACT = "exact"
    CLOSE = "close"
    OFF = "off"


# --- Bend specifications (tagged variant) ---

@dataclass(frozen=True)
class BendSpec:
    kind: ClassVar[BendKind]

    def _set(self, name: str, value) -> None:
        object.__setattr__(self, name, value)


@dataclass(frozen=True)
class Offset(BendSpec):
    kind: ClassVar[BendKind] = BendKind.OFFSET
    height: float
    angle: float

    def __post_init__(self):
        self._set("height", validate_length(self.height, "height"))
        self._set("angle", validate_angle(self.angle))


@dataclass(frozen=True)
class Saddle3(BendSpec):
    """3-point saddle. `angle` is the center bend; each side bend is angle / 2."""
    kind: ClassVar[BendKind] = BendKind.SADDLE_3
    height: float
    angle: float

    def __post_init__(self):
        self._set("height", validate_length(self.height, "height"))
        self._set("angle", validate_angle(self.angle))


@dataclass(frozen=True)
class Saddle4(BendSpec):
    kind: ClassVar[BendKind] = BendKind.SADDLE_4
    height: float
    width: float
    angle: float

    def __post_init__(self):
        self._set("height", validate_length(self.height, "height"))
        self._set("width", validate_length(self.width, "width"))
        self._set("angle", validate_angle(self.angle))


@dataclass(frozen=True)
class RollingOffset(BendSpec):
    kind: ClassVar[BendKind] = BendKind.ROLLING_OFFSET
    rise: float
    roll: float
    angle: float

    def __post_init__(self):
        self._set("rise", validate_length(self.rise, "rise"))
        self._set("roll", validate_length(self.roll, "roll"))
        self._set("angle", validate_angle(self.angle))


@dataclass(frozen=True)
class Concentric(BendSpec):
    kind: ClassVar[BendKind] = BendKind.CONCENTRIC
    spacing: float
    angle: float
    pipe_count: int = 3

    def __post_init__(self):
        self._set("spacing", validate_length(self.spacing, "spacing"))
        self._set("angle", validate_angle(self.angle))
        self._set("pipe_count", validate_count(self.pipe_count, "pipe_count"))


@dataclass(frozen=True)
class Segmented(BendSpec):
    kind: ClassVar[BendKind] = BendKind.SEGMENTED
    radius: float
    angle: float
    shot_count: int = 5

    def __post_init__(self):
        self._set("radius", validate_length(self.radius, "radius"))
        self._set("angle", validate_angle(self.angle))
        self._set("shot_count", validate_count(self.shot_count, "shot_count"))


@dataclass(frozen=True)
class BendResult:
    kind: BendKind
    travel: Optional[float] = None
    run: Optional[float] = None
    shrinkage: float = 0.0
    center_to_side: Optional[float] = None
    true_offset: Optional[float] = None
    stagger: Optional[float] = None
    arc_length: Optional[float] = None
    chord_length: Optional[float] = None
    developed_length: Optional[float] = None
    per_shot_angle: Optional[float] = None

    @property
    def distance(self) -> Optional[float]:
        return self.run


# --- Fill compliance ---

@dataclass(frozen=True)
class Conductor:
    gauge: str
    count: int

    def __post_init__(self):
        object.__setattr__(self, "gauge", str(self.gauge).strip().lstrip("#"))
        object.__setattr__(self, "count", validate_count(self.count, f"count for #{self.gauge}", minimum=0))


@dataclass(frozen=True)
class ConduitFillInput:
    conduit_type: ConduitType
    conduit_size: str
    conductors: Tuple[Conductor, ...]
    insulation: Insulation = Insulation.THHN
    conduit_length: Optional[float] = None  # inches, nipple detection

    def __post_init__(self):
        conductors = tuple(self.conductors)
        gauges = [c.gauge for c in conductors]
        if len(gauges) != len(set(gauges)):
            raise InvalidParameterError(f"Duplicate gauge in conductor list: {gauges}")
        object.__setattr__(self, "conductors", conductors)
        if self.conduit_length is not None:
            object.__setattr__(self, "conduit_length", validate_length(self.conduit_length, "conduit_length"))

    @property
    def conductor_count(self) -> int:
        return sum(c.count for c in self.conductors)


@dataclass(frozen=True)
class ConduitFillResult:
    total_conductor_area: float
    conduit_internal_area: float
    fill_percent: float
    max_allowed_percent: float
    max_allowed_area: float
    conductor_count: int
    is_nipple: bool
    compliant: bool


@dataclass(frozen=True)
class BoxFillInput:
    box_type: BoxType
    count_14: int = 0
    count_12: int = 0
    device_count: int = 0

    def __post_init__(self):
        for name in ("count_14", "count_12", "device_count"):
            object.__setattr__(self, name, validate_count(getattr(self, name), name, minimum=0))


@dataclass(frozen=True)
class BoxFillResult:
    volume_used: float
    capacity: float
    compliant: bool


@dataclass(frozen=True)
class DetailedBoxFillInput:
    """Box fill counted the long way: allowances scale with the largest conductor."""
    box_type: BoxType
    conductors: Tuple[Conductor, ...] = ()
    device_count: int = 0
    has_clamps: bool = False
    ground_count: int = 0
    largest_ground_gauge: str = "14"
    support_fittings: int = 0

    def __post_init__(self):
        object.__setattr__(self, "conductors", tuple(self.conductors))
        for name in ("device_count", "ground_count", "support_fittings"):
            object.__setattr__(self, name, validate_count(getattr(self, name), name, minimum=0))


@dataclass(frozen=True)
class DetailedBoxFillResult:
    conductor_volume: float
    device_volume: float
    clamp_volume: float
    ground_volume: float
    support_volume: float
    volume_used: float
    capacity: float
    largest_conductor: Optional[str]
    compliant: bool


# --- Advisories ---

@dataclass(frozen=True)
class BendWarning:
    severity: Severity
    message: str
