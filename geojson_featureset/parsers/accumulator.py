"""
Feature Accumulator
===================

Owns the feature under construction while the state machine walks the
token stream.  The state machine decides *when* something happens; this
module decides *what* it does to the feature:

* property scalars are stored under their key, last write wins;
* coordinate numbers are collected in a :class:`CoordinateAccumulator`
  and the first two become the feature's point once the outermost
  coordinate array closes (anything after them, such as ``z`` or the
  remaining vertices of a line, is dropped);
* on completion the feature is frozen into a
  :class:`~geojson_featureset.models.Feature`, appended to the sink and a
  fresh placeholder feature is started.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, List, Optional, Protocol, Tuple

from ..models import Feature, Point, PropertyValue, as_float

logger = logging.getLogger(__name__)


class FeatureSink(Protocol):
    def append(self, feature: Feature) -> None:
        ...


class CoordinateAccumulator:
    """Flat list of coordinate numbers plus the nesting depth of open arrays."""

    def __init__(self) -> None:
        self.values: List[float] = []
        self.depth = 0

    def open(self) -> None:
        self.depth += 1

    def close(self) -> bool:
        """Close one array level; return ``True`` once the outermost one closed."""
        self.depth -= 1
        return self.depth <= 0

    def push(self, value: float) -> None:
        self.values.append(as_float(value))

    def first_pair(self) -> Optional[Tuple[float, float]]:
        if len(self.values) < 2:
            return None
        return self.values[0], self.values[1]

    def clear(self) -> None:
        self.values.clear()
        self.depth = 0


class FeatureAccumulator:
    """Build features one at a time and hand each finished one to ``sink``.

    Parameters
    ----------
    sink : FeatureSink
        Receives every finalised feature, in order.
    first_id : int
        Id given to the first feature.
    """

    def __init__(self, sink: FeatureSink, first_id: int = 1) -> None:
        self.sink = sink
        self.next_id = first_id
        self.coordinates = CoordinateAccumulator()
        self._reset()

    def _reset(self) -> None:
        self.geometry = Point()
        self.properties: Dict[str, PropertyValue] = {}
        self.declared_type: Optional[str] = None
        self.coordinates.clear()

    def set_property(self, name: str, value: PropertyValue) -> None:
        self.properties[name] = value

    def set_declared_type(self, name: str) -> None:
        self.declared_type = name

    def push_coordinate(self, value: float) -> None:
        self.coordinates.push(value)

    def commit_coordinates(self) -> None:
        """Move the placeholder point to the first accumulated pair."""
        pair = self.coordinates.first_pair()
        if pair is None:
            logger.debug(
                "Feature %d: %d coordinate value(s), keeping placeholder point",
                self.next_id,
                len(self.coordinates.values),
            )
            return
        self.geometry.move_to(*pair)

    def finalize(self) -> Feature:
        feature = Feature(
            id=self.next_id,
            geometry=self.geometry.copy(),
            properties=MappingProxyType(dict(self.properties)),
            declared_type=self.declared_type,
        )
        self.sink.append(feature)
        self.next_id += 1
        self._reset()
        return feature


__all__ = ["CoordinateAccumulator", "FeatureAccumulator", "FeatureSink"]
