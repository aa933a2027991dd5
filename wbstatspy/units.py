"""Unit-tagged numeric values used by indicator series and calculations."""

from dataclasses import dataclass
from enum import Enum
from typing import Union

Number = Union[int, float]


class Unit(Enum):
    """Unit tag attached to an indicator series."""
    AREA = "km2"
    PERCENT = "percent"


@dataclass(frozen=True, order=True)
class Area:
    """An area in square kilometres."""
    value: float

    def __float__(self) -> float:
        return float(self.value)

    def __add__(self, other):
        if isinstance(other, Area):
            return Area(self.value + other.value)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Area):
            return Area(self.value - other.value)
        return NotImplemented

    def __mul__(self, other):
        # Only dimensionless scaling keeps the unit
        if isinstance(other, (int, float)):
            return Area(self.value * other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, Area):
            return self.value / other.value
        if isinstance(other, (int, float)):
            return Area(self.value / other)
        return NotImplemented

    def share(self, percent: "Percent") -> "Area":
        """Return the part of this area covered by ``percent``."""
        percent = as_percent(percent)
        return Area(self.value * percent.value / 100.0)


@dataclass(frozen=True, order=True)
class Percent:
    """A percentage in the 0-100 scale used by the World Bank."""
    value: float

    def __float__(self) -> float:
        return float(self.value)

    def __add__(self, other):
        if isinstance(other, Percent):
            return Percent(self.value + other.value)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Percent):
            return Percent(self.value - other.value)
        return NotImplemented

    def as_fraction(self) -> float:
        """Convert to a plain fraction (10% -> 0.1)."""
        return self.value / 100.0

    @classmethod
    def from_fraction(cls, fraction: Number) -> "Percent":
        """Build from a plain fraction (0.1 -> 10%)."""
        return cls(fraction * 100.0)


def as_area(value: Union[Area, Number]) -> Area:
    """Coerce a plain number (taken as km²) to an ``Area``."""
    if isinstance(value, Area):
        return value
    if isinstance(value, Percent):
        raise TypeError("Expected an area in km², got a percentage")
    return Area(float(value))


def as_percent(value: Union[Percent, Number]) -> Percent:
    """Coerce a plain number (taken as a 0-100 percentage) to a ``Percent``."""
    if isinstance(value, Percent):
        return value
    if isinstance(value, Area):
        raise TypeError("Expected a percentage, got an area")
    return Percent(float(value))


UNIT_TYPES = {
    Unit.AREA: Area,
    Unit.PERCENT: Percent,
}
