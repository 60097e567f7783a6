"""Top level package for the geojson_featureset project.

This package turns GeoJSON ``FeatureCollection`` documents into point
features in a single event-driven pass, without ever building the
document tree.  The main entry points are:

* :class:`GeoJSONFeatureset` – parse a document and retrieve its features
  one at a time;
* :class:`GeoJSONDatasource` – load a document from a file, a URL or a
  string and query its features by bounding box;
* :mod:`geojson_featureset.export` – convert features to pandas and
  geopandas structures;
* :mod:`geojson_featureset.main` – the FastAPI application.
"""

__version__ = "0.1"

from .config import ParserSettings, load_settings
from .datasource import GeoJSONDatasource
from .errors import FeaturesetError, MalformedInput
from .featureset import FeatureCursor, FeatureSequence, GeoJSONFeatureset
from .models import BoundingBox, Feature, Point, PropertyValue

__all__ = [
    "BoundingBox",
    "Feature",
    "FeatureCursor",
    "FeatureSequence",
    "FeaturesetError",
    "GeoJSONDatasource",
    "GeoJSONFeatureset",
    "MalformedInput",
    "ParserSettings",
    "Point",
    "PropertyValue",
    "load_settings",
    "__version__",
]
