"""
Feature Data Model
==================

Plain data containers produced by the parser:

* :class:`Point` – the only geometry the parser ever populates.  A feature
  starts with a placeholder point at the origin which is moved in place
  once its coordinates have been read.
* :class:`Feature` – one spatial record: an id, a point and an ordered,
  read-only bag of property values.
* :class:`BoundingBox` – an axis-aligned extent used by the datasource for
  envelopes and spatial filtering.

Property values are ordinary Python scalars.  ``PropertyValue`` is the
union of the four JSON scalar kinds the parser keeps (null, boolean,
number and text); numbers are always stored as ``float``.

Known limitation
----------------
The ``type`` member of a GeoJSON geometry is read and kept on the feature
as :attr:`Feature.declared_type`, but it never changes the emitted shape:
a ``LineString`` or ``Polygon`` collapses to a point at its first
coordinate pair.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from decimal import Decimal
from types import MappingProxyType
from typing import Any, ClassVar, Dict, Iterable, Mapping, Optional, Sequence, Tuple, Union

PropertyValue = Union[None, bool, float, str]


def as_float(number: Any) -> float:
    """Convert a JSON number to ``float``, saturating to infinity like ``strtod``."""
    try:
        return float(number)
    except OverflowError:
        return math.inf if number > 0 else -math.inf


def to_property_value(raw: Any) -> PropertyValue:
    """Map a scalar token value onto a :data:`PropertyValue`.

    ``bool`` is checked before the numeric types since it is a subclass
    of ``int``.
    """
    if raw is None or isinstance(raw, (bool, str)):
        return raw
    if isinstance(raw, (int, float, Decimal)):
        return as_float(raw)
    raise TypeError(f"Unsupported property value type: {type(raw).__name__}")


def property_kind(value: PropertyValue) -> str:
    """Return the variant name of a property value."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, float):
        return "number"
    return "string"


@dataclass
class Point:
    """Point geometry; ``(0, 0)`` until :meth:`move_to` is called."""

    x: float = 0.0
    y: float = 0.0

    geom_type: ClassVar[str] = "Point"

    def move_to(self, x: float, y: float) -> None:
        self.x = float(x)
        self.y = float(y)

    def copy(self) -> "Point":
        return replace(self)

    @property
    def coords(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def __geo_interface__(self) -> Dict[str, Any]:
        return {"type": self.geom_type, "coordinates": [self.x, self.y]}


@dataclass(frozen=True)
class Feature:
    """A finalised feature.

    Attributes
    ----------
    id : int
        Sequential identifier, starting at 1 in document order.
    geometry : Point
        Location of the feature.  Features without coordinates keep the
        placeholder at the origin.
    properties : Mapping[str, PropertyValue]
        Read-only mapping preserving the order in which keys were first
        seen.  Repeated keys hold the last value assigned.
    declared_type : Optional[str]
        The geometry ``type`` string found in the source, informational
        only.
    """

    id: int
    geometry: Point
    properties: Mapping[str, PropertyValue] = field(default_factory=lambda: MappingProxyType({}))
    declared_type: Optional[str] = None

    def __getitem__(self, name: str) -> PropertyValue:
        return self.properties[name]

    def get(self, name: str, default: Any = None) -> Any:
        return self.properties.get(name, default)

    @property
    def x(self) -> float:
        return self.geometry.x

    @property
    def y(self) -> float:
        return self.geometry.y

    @property
    def __geo_interface__(self) -> Dict[str, Any]:
        return {
            "type": "Feature",
            "id": self.id,
            "geometry": self.geometry.__geo_interface__,
            "properties": dict(self.properties),
        }


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box ``(minx, miny, maxx, maxy)``; bounds are inclusive."""

    minx: float
    miny: float
    maxx: float
    maxy: float

    @classmethod
    def from_sequence(cls, values: Sequence[float]) -> "BoundingBox":
        """Build a box from ``[minx, miny, maxx, maxy]``.

        Raises
        ------
        ValueError
            If ``values`` does not hold four finite numbers or a minimum
            exceeds its maximum.
        """
        if isinstance(values, (str, bytes)) or len(values) != 4:
            raise ValueError("A bounding box needs exactly four numbers: minx, miny, maxx, maxy")
        try:
            minx, miny, maxx, maxy = (float(v) for v in values)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Bounding box values must be numbers: {values!r}") from exc
        if not all(math.isfinite(v) for v in (minx, miny, maxx, maxy)):
            raise ValueError(f"Bounding box values must be finite: {values!r}")
        if minx > maxx or miny > maxy:
            raise ValueError(f"Bounding box minimum exceeds maximum: {values!r}")
        return cls(minx, miny, maxx, maxy)

    @classmethod
    def world(cls) -> "BoundingBox":
        return cls(-180.0, -90.0, 180.0, 90.0)

    @classmethod
    def empty(cls) -> "BoundingBox":
        # Inverted bounds so that the first expand_to_include sets them.
        return cls(math.inf, math.inf, -math.inf, -math.inf)

    @property
    def is_empty(self) -> bool:
        return self.minx > self.maxx or self.miny > self.maxy

    @property
    def width(self) -> float:
        return 0.0 if self.is_empty else self.maxx - self.minx

    @property
    def height(self) -> float:
        return 0.0 if self.is_empty else self.maxy - self.miny

    def contains(self, point: Union[Point, Tuple[float, float]]) -> bool:
        x, y = point.coords if isinstance(point, Point) else point
        return self.minx <= x <= self.maxx and self.miny <= y <= self.maxy

    def intersects(self, other: "BoundingBox") -> bool:
        if self.is_empty or other.is_empty:
            return False
        return not (
            other.minx > self.maxx
            or other.maxx < self.minx
            or other.miny > self.maxy
            or other.maxy < self.miny
        )

    def expand_to_include(self, point: Union[Point, Tuple[float, float]]) -> "BoundingBox":
        x, y = point.coords if isinstance(point, Point) else point
        return BoundingBox(min(self.minx, x), min(self.miny, y), max(self.maxx, x), max(self.maxy, y))

    def pad(self, amount: float) -> "BoundingBox":
        return BoundingBox(self.minx - amount, self.miny - amount, self.maxx + amount, self.maxy + amount)

    def as_list(self) -> list:
        return [self.minx, self.miny, self.maxx, self.maxy]

    @classmethod
    def of_points(cls, points: Iterable[Union[Point, Tuple[float, float]]]) -> "BoundingBox":
        box = cls.empty()
        for point in points:
            box = box.expand_to_include(point)
        return box


__all__ = [
    "BoundingBox",
    "Feature",
    "Point",
    "PropertyValue",
    "property_kind",
    "to_property_value",
]
