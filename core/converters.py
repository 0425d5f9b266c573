import math
import re
from typing import Tuple, Union

from core.errors import InvalidAngleError, InvalidParameterError

MIN_ANGLE = 1.0
MAX_ANGLE = 179.0

_FRACTION_RE = re.compile(r"^(?:(\d+)[\s-]+)?(\d+)/(\d+)$")


def validate_angle(angle: float, field: str = "angle") -> float:
    """Returns the angle as float, or raises InvalidAngleError if outside (0, 180)."""
    try:
        value = float(angle)
    except (TypeError, ValueError):
        raise InvalidAngleError(angle, field) from None
    if not math.isfinite(value) or value <= 0.0 or value >= 180.0:
        raise InvalidAngleError(value, field)
    return value


def clamp_angle(angle: float, minimum: float = MIN_ANGLE, maximum: float = MAX_ANGLE) -> Tuple[float, bool]:
    """
    Clamps a raw UI angle into the usable range.
    Returns (clamped_angle, was_clamped) so callers can report the adjustment.
    """
    value = float(angle)
    if math.isnan(value):
        return minimum, True
    clamped = min(maximum, max(minimum, value))
    return clamped, clamped != value


def validate_length(value: float, field: str) -> float:
    """Lengths are positive, finite inches. No upper bound is enforced here."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise InvalidParameterError(f"{field} must be a number (got {value!r})") from None
    if not math.isfinite(v) or v <= 0.0:
        raise InvalidParameterError(f"{field} must be a positive length in inches (got {value})")
    return v


def validate_count(value: int, field: str, minimum: int = 2) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        else:
            raise InvalidParameterError(f"{field} must be an integer (got {value!r})")
    if value < minimum:
        raise InvalidParameterError(f"{field} must be at least {minimum} (got {value})")
    return value


def parse_trade_size(size: Union[str, float, int]) -> float:
    """
    Parses a nominal trade size into inches.
    Accepts "0.75", "3/4", "1-1/4", '1 1/4"' or plain numbers.
    """
    if isinstance(size, (int, float)) and not isinstance(size, bool):
        value = float(size)
    else:
        text = str(size).strip().replace('"', "").replace("in", "").strip()
        match = _FRACTION_RE.match(text)
        try:
            if match:
                whole = int(match.group(1)) if match.group(1) else 0
                value = whole + int(match.group(2)) / int(match.group(3))
            else:
                value = float(text)
        except (ValueError, ZeroDivisionError):
            raise InvalidParameterError(f"Unrecognized trade size: {size!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise InvalidParameterError(f"Trade size must be positive (got {size!r})")
    return value


def trade_size_key(size: Union[str, float, int]) -> str:
    """Normalizes a trade size to the decimal string used as table key ("3/4" -> "0.75")."""
    return f"{parse_trade_size(size):g}"


def gcd(a: int, b: int) -> int:
    while b:
        a, b = b, a % b
    return a


def format_inches(value: float, denominator: int = 16) -> str:
    """
    Formats inches as a tape-measure fraction, e.g. 26.13 -> '26 1/8"'.
    Use denominator 0 for plain two-decimal output.
    Returns "ERROR" for NaN or infinity.
    """
    if math.isnan(value) or math.isinf(value):
        return "ERROR"
    if denominator == 0:
        return f'{value:.2f}"'
    if value < 0:
        result = format_inches(-value, denominator)
        return result if result == '0"' else f"-{result}"

    total_parts = round(value * denominator)
    whole = total_parts // denominator
    numerator = total_parts % denominator
    if numerator == 0:
        return f'{whole}"'

    common = gcd(numerator, denominator)
    fraction = f"{numerator // common}/{denominator // common}"
    if whole == 0:
        return f'{fraction}"'
    return f'{whole} {fraction}"'


def format_decimal(value: float, places: int = 2) -> str:
    if math.isnan(value) or math.isinf(value):
        return "ERROR"
    return f"{value:.{places}f}"
