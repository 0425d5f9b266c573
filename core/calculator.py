from abc import ABC, abstractmethod
from typing import Tuple

from .components import GeometryPath
from .models import BendKind, BendResult, BendSpec


class BendCalculator(ABC):
    kind: BendKind

    @abstractmethod
    def measure(self, spec: BendSpec) -> BendResult:
        """Derives the bender measurements (travel, run, shrinkage ...) for the spec."""
        pass

    @abstractmethod
    def layout(self, spec: BendSpec, result: BendResult) -> GeometryPath:
        """Lays out the drawable centerline, obstacle and dimensions from the measured result."""
        pass

    @abstractmethod
    def describe(self, spec: BendSpec, result: BendResult) -> str:
        """One-line summary suitable for sharing or a report cell."""
        pass

    def calculate(self, spec: BendSpec) -> Tuple[BendResult, GeometryPath]:
        """Performs the full calculation for a bend. Returns (Result, Geometry)."""
        if spec.kind is not self.kind:
            raise TypeError(f"{type(self).__name__} cannot handle {spec.kind.value} bends")
        result = self.measure(spec)
        return result, self.layout(spec, result)
