from typing import Union

from core.converters import trade_size_key
from core.errors import InvalidParameterError, UnknownLookupKeyError
from core.models import BoxType, ConduitType, Insulation

# NEC Chapter 9, Table 5 - Dimensions of Insulated Conductors
# Format: {Insulation: {SizeAWG: (Area in², Diameter in)}}
WIRE_DATA = {
    Insulation.THHN: {
        "14": (0.0097, 0.111),
        "12": (0.0133, 0.130),
        "10": (0.0211, 0.164),
        "8":  (0.0366, 0.216),
        "6":  (0.0507, 0.254),
    },
    Insulation.XHHW: {
        "14": (0.0139, 0.133),
        "12": (0.0181, 0.152),
        "10": (0.0243, 0.176),
        "8":  (0.0437, 0.236),
        "6":  (0.0590, 0.274),
    },
}

# NEC Chapter 9, Table 4 - Dimensions and Percent Area of Conduit (100% area)
# Format: {ConduitType: {TradeSize: (Area in², Internal Diameter in)}}
CONDUIT_DATA = {
    ConduitType.EMT: {
        "0.5":  (0.304, 0.622),
        "0.75": (0.533, 0.824),
        "1":    (0.864, 1.049),
        "1.25": (1.496, 1.380),
        "1.5":  (2.036, 1.610),
        "2":    (3.356, 2.067),
    },
    ConduitType.IMC: {
        "0.5":  (0.342, 0.660),
        "0.75": (0.586, 0.864),
        "1":    (0.959, 1.105),
        "1.25": (1.647, 1.448),
        "1.5":  (2.225, 1.683),
        "2":    (3.630, 2.150),
    },
    ConduitType.RMC: {
        "0.5":  (0.355, 0.672),
        "0.75": (0.549, 0.836),
        "1":    (0.887, 1.063),
    },
}

# NEC Table 314.16(A) - Metal Boxes (in³)
BOX_CAPACITY = {
    BoxType.SQUARE_4X1_1_2: 21.0,
    BoxType.SQUARE_4X2_1_8: 30.3,
    BoxType.SQUARE_4_11_16: 42.0,
    BoxType.HANDY_BOX: 13.0,
}

# Fraction of the bend angle the conduit relaxes after release
SPRINGBACK_FACTORS = {
    ConduitType.EMT: 0.05,
    ConduitType.IMC: 0.03,
    ConduitType.RMC: 0.02,
}

# Minimum field bend radius to the conduit centerline (inches) by trade size
MIN_BEND_RADIUS = {
    "0.5": 4.0,
    "0.75": 4.5,
    "1": 5.75,
    "1.25": 7.25,
    "1.5": 8.25,
    "2": 10.5,
    "2.5": 13.0,
    "3": 15.0,
}

# NEC Table 314.16(B) - Volume Allowance Required per Conductor (in³)
WIRE_VOLUME = {
    "14": 2.0,
    "12": 2.25,
    "10": 2.5,
    "8": 3.0,
    "6": 5.0,
}

# Fixed allowances used by the simple box fill screen
BOX_FILL_14 = 2.0
BOX_FILL_12 = 2.25
BOX_FILL_DEVICE = 4.5

# NEC Chapter 9, Table 1 - Percent of Cross Section of Conduit for Conductors
# Format: {Max_Conductors: Percent}
FILL_LIMITS = {
    1: 53.0,
    2: 31.0,
}
FILL_LIMIT_OVER_2 = 40.0
# Chapter 9 Note 4: nipples not exceeding 24 in
NIPPLE_MAX_LENGTH = 24.0
NIPPLE_FILL_LIMIT = 60.0


def get_wire_area(gauge: str, insulation: Insulation = Insulation.THHN) -> float:
    try:
        return WIRE_DATA[insulation][str(gauge)][0]
    except KeyError:
        raise UnknownLookupKeyError("Wire area", f"#{gauge} {getattr(insulation, 'value', insulation)}") from None


def get_conduit_area(conduit_type: ConduitType, trade_size: Union[str, float]) -> float:
    try:
        key = trade_size_key(trade_size)
    except InvalidParameterError:
        raise UnknownLookupKeyError("Conduit area", trade_size) from None
    try:
        return CONDUIT_DATA[conduit_type][key][0]
    except KeyError:
        raise UnknownLookupKeyError("Conduit area", f"{getattr(conduit_type, 'value', conduit_type)} {key}") from None


def get_box_capacity(box_type: BoxType) -> float:
    try:
        return BOX_CAPACITY[box_type]
    except KeyError:
        raise UnknownLookupKeyError("Box capacity", box_type) from None


def get_springback_factor(material: ConduitType) -> float:
    try:
        return SPRINGBACK_FACTORS[material]
    except KeyError:
        raise UnknownLookupKeyError("Springback factor", material) from None


def get_min_bend_radius(trade_size: Union[str, float]) -> float:
    try:
        key = trade_size_key(trade_size)
    except InvalidParameterError:
        raise UnknownLookupKeyError("Minimum bend radius", trade_size) from None
    try:
        return MIN_BEND_RADIUS[key]
    except KeyError:
        raise UnknownLookupKeyError("Minimum bend radius", key) from None


def get_wire_volume(gauge: str) -> float:
    try:
        return WIRE_VOLUME[str(gauge)]
    except KeyError:
        raise UnknownLookupKeyError("Conductor volume allowance", f"#{gauge}") from None


def get_fill_limit(conductor_count: int, is_nipple: bool = False) -> float:
    if is_nipple:
        return NIPPLE_FILL_LIMIT
    return FILL_LIMITS.get(conductor_count, FILL_LIMIT_OVER_2)


def conduit_sizes(conduit_type: ConduitType) -> list[str]:
    return list(CONDUIT_DATA.get(conduit_type, {}).keys())


def wire_gauges(insulation: Insulation = Insulation.THHN) -> list[str]:
    return list(WIRE_DATA.get(insulation, {}).keys())
