"""Parsing core of the geojson_featureset package.

The three modules below cooperate during a single forward scan of a
GeoJSON document:

* ``token_source`` turns UTF-8 chunks into low-level JSON events (ijson);
* ``state_machine`` tracks where those events sit in the GeoJSON schema;
* ``accumulator`` builds the feature under construction and emits it
  when the state machine reports it complete.

See :class:`geojson_featureset.featureset.GeoJSONFeatureset` for the
driver that wires them together.
"""

from .accumulator import CoordinateAccumulator, FeatureAccumulator
from .state_machine import ParseState, ParseStateMachine
from .token_source import IntegerOverflow, TokenSource

__all__ = [
    "CoordinateAccumulator",
    "FeatureAccumulator",
    "IntegerOverflow",
    "ParseState",
    "ParseStateMachine",
    "TokenSource",
]
