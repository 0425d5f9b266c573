class InvalidParameterError(ValueError):
    """Raised when a bend or fill parameter is outside its valid domain."""
    pass


class InvalidAngleError(InvalidParameterError):
    """Raised when an angle falls outside the open interval (0°, 180°)."""

    def __init__(self, angle: float, field: str = "angle"):
        self.angle = angle
        self.field = field
        super().__init__(f"{field} must be strictly between 0° and 180° (got {angle})")


class UnknownLookupKeyError(KeyError):
    """Raised when a reference table has no entry for the requested key."""

    def __init__(self, table: str, key):
        self.table = table
        self.key = key
        super().__init__(f"{table}: no entry for {key!r}")

    def __str__(self) -> str:
        return self.args[0]
