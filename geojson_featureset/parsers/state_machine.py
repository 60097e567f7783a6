"""
Parse State Machine
===================

A single register tracking where the token stream currently is inside
the fixed GeoJSON schema::

    FeatureCollection -> features[] -> Feature -> {geometry{type, coordinates}, properties{...}}

No path stack is kept.  Keys are resolved from the register alone:

=================  ===========================================================
current state      effect of a ``key`` event
=================  ===========================================================
``IN_PROPERTIES``  the key becomes the active property name, no transition
``OUTSIDE``        only ``features`` -> ``IN_FEATURES``; keys of foreign members
                   (``crs``, ``bbox``, ...) never move the machine
anything else      ``features`` -> ``IN_FEATURES``, ``geometry`` ->
                   ``IN_GEOMETRY``, ``type`` (only while ``IN_GEOMETRY``) ->
                   ``IN_TYPE``, ``properties`` -> ``IN_PROPERTIES``,
                   ``coordinates`` -> ``IN_COORDINATES``; every other key
                   (including the Feature level ``"type": "Feature"``) is a
                   no-op
=================  ===========================================================

Closing an object while ``IN_PROPERTIES`` or ``IN_GEOMETRY`` moves back to
``IN_FEATURE``; closing it while ``IN_FEATURE`` completes the feature and
moves to ``IN_FEATURES``.  Closing the outermost coordinate array commits
the point and moves to ``IN_GEOMETRY``; closing an array while
``IN_FEATURES`` moves ``OUTSIDE``.  Everything else leaves the state
alone.

The machine never rejects structure; well-formedness is the tokenizer's
job.  Values it has no rule for degrade silently:

* a property whose value is an object or array is skipped (the nesting
  depth inside ``properties`` is counted so that inner keys and scalars
  are not mistaken for properties);
* a ``properties`` member that is not an object (``null``) leaves the
  property bag empty;
* geometries other than points collapse to their first coordinate pair;
* closing an object while ``IN_TYPE`` changes nothing, so a geometry whose
  ``type`` member comes after ``coordinates`` leaves the machine in
  ``IN_TYPE``: that feature is not completed on its own and its values
  carry over into the next feature of the array.
"""

from __future__ import annotations

import enum
from decimal import Decimal
from typing import Any, Callable, Dict, Optional

from ..models import to_property_value
from ..transcoder import Transcoder
from .accumulator import FeatureAccumulator


class ParseState(enum.Enum):
    OUTSIDE = "outside"
    IN_FEATURES = "in_features"
    IN_FEATURE = "in_feature"
    IN_GEOMETRY = "in_geometry"
    IN_TYPE = "in_type"
    IN_COORDINATES = "in_coordinates"
    IN_PROPERTIES = "in_properties"


_KEY_TRANSITIONS = {
    "features": ParseState.IN_FEATURES,
    "geometry": ParseState.IN_GEOMETRY,
    "properties": ParseState.IN_PROPERTIES,
    "coordinates": ParseState.IN_COORDINATES,
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


class ParseStateMachine:
    """Advance :class:`ParseState` on each token event and drive the accumulator.

    Parameters
    ----------
    accumulator : FeatureAccumulator
        Receives property values, coordinates, the declared geometry
        type and the feature-complete signal.
    transcoder : Transcoder
        Canonicalises strings before they are stored.
    """

    def __init__(self, accumulator: FeatureAccumulator, transcoder: Transcoder) -> None:
        self.accumulator = accumulator
        self.transcoder = transcoder
        self.state = ParseState.OUTSIDE
        self.property_name: Optional[str] = None
        # containers opened since entering IN_PROPERTIES; 1 = the properties object itself
        self._property_depth = 0
        self._dispatch: Dict[str, Callable[..., None]] = {
            "start_map": lambda _value: self.start_object(),
            "end_map": lambda _value: self.end_object(),
            "start_array": lambda _value: self.start_array(),
            "end_array": lambda _value: self.end_array(),
            "map_key": self.key,
            "null": self.scalar,
            "boolean": self.scalar,
            "integer": self.scalar,
            "double": self.scalar,
            "number": self.scalar,
            "string": self.scalar,
        }

    def handle(self, event: str, value: Any) -> None:
        """Entry point for the token source."""
        self._dispatch[event](value)

    def key(self, name: str) -> None:
        if self.state is ParseState.IN_PROPERTIES:
            if self._property_depth <= 1:
                self.property_name = name
            return
        if name == "type":
            if self.state is ParseState.IN_GEOMETRY:
                self.state = ParseState.IN_TYPE
            return
        target = _KEY_TRANSITIONS.get(name)
        if target is None:
            return
        if self.state is ParseState.OUTSIDE and target is not ParseState.IN_FEATURES:
            # foreign members of the collection, such as "crs"
            return
        if target is ParseState.IN_PROPERTIES:
            self.property_name = None
            self._property_depth = 0
        self.state = target

    def start_object(self) -> None:
        if self.state is ParseState.IN_PROPERTIES:
            self._property_depth += 1

    def end_object(self) -> None:
        if self.state is ParseState.IN_PROPERTIES:
            self._property_depth -= 1
            if self._property_depth <= 0:
                self.state = ParseState.IN_FEATURE
        elif self.state is ParseState.IN_GEOMETRY:
            self.state = ParseState.IN_FEATURE
        elif self.state is ParseState.IN_FEATURE:
            self.state = ParseState.IN_FEATURES
            self.accumulator.finalize()

    def start_array(self) -> None:
        if self.state is ParseState.IN_COORDINATES:
            self.accumulator.coordinates.open()
        elif self.state is ParseState.IN_PROPERTIES:
            self._property_depth += 1

    def end_array(self) -> None:
        if self.state is ParseState.IN_COORDINATES:
            if self.accumulator.coordinates.close():
                self.accumulator.commit_coordinates()
                self.state = ParseState.IN_GEOMETRY
        elif self.state is ParseState.IN_FEATURES:
            self.state = ParseState.OUTSIDE
        elif self.state is ParseState.IN_PROPERTIES:
            self._property_depth -= 1
            if self._property_depth <= 0:
                # "properties" held an array rather than an object
                self.state = ParseState.IN_FEATURE

    def scalar(self, value: Any) -> None:
        if self.state is ParseState.IN_COORDINATES:
            if _is_number(value):
                self.accumulator.push_coordinate(value)
        elif self.state is ParseState.IN_PROPERTIES:
            if self._property_depth == 0:
                # "properties": null and friends
                self.state = ParseState.IN_FEATURE
            elif self._property_depth == 1 and self.property_name is not None:
                if isinstance(value, str):
                    value = self.transcoder.transcode(value)
                self.accumulator.set_property(self.property_name, to_property_value(value))
        elif self.state is ParseState.IN_TYPE:
            if isinstance(value, str):
                self.accumulator.set_declared_type(self.transcoder.transcode(value))


__all__ = ["ParseState", "ParseStateMachine"]
