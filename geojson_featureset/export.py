"""
Feature Export Module
=====================

Helpers converting parsed features into the tabular and geospatial
structures used downstream:

* :func:`to_records` – plain dictionaries, one per feature;
* :func:`to_dataframe` – a :class:`pandas.DataFrame` with ``id``, ``x``,
  ``y`` and ``declared_type`` columns followed by one column per property;
* :func:`to_geojson` – a GeoJSON ``FeatureCollection`` of points;
* :func:`to_geodataframe` – a :class:`geopandas.GeoDataFrame`.

Because :mod:`geopandas` is not part of the core dependencies,
:func:`to_geodataframe` imports it lazily and raises an
:class:`ImportError` with a clear message when it (or :mod:`shapely`) is
missing.  No fallback to a plain DataFrame is attempted.

Example
-------
>>> from geojson_featureset import GeoJSONFeatureset, BoundingBox
>>> from geojson_featureset.export import to_dataframe
>>> df = to_dataframe(GeoJSONFeatureset(BoundingBox.world(), text))
>>> df[["id", "x", "y"]].head()
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

import pandas as pd

from .models import Feature

BASE_COLUMNS = ["id", "x", "y", "declared_type"]


def to_records(features: Iterable[Feature]) -> List[Dict[str, Any]]:
    """Flatten features into dictionaries with nested ``properties``."""
    return [
        {
            "id": f.id,
            "x": f.geometry.x,
            "y": f.geometry.y,
            "declared_type": f.declared_type,
            "properties": dict(f.properties),
        }
        for f in features
    ]


def to_dataframe(features: Iterable[Feature]) -> pd.DataFrame:
    """Build a DataFrame with one row per feature.

    Property columns follow the base columns in order of first appearance.
    Missing properties are filled with ``NaN`` as pandas does for ragged
    records.  A property named like a base column is prefixed with
    ``prop_`` to keep both.
    """
    rows: List[Dict[str, Any]] = []
    property_columns: Dict[str, str] = {}
    for f in features:
        row: Dict[str, Any] = {
            "id": f.id,
            "x": f.geometry.x,
            "y": f.geometry.y,
            "declared_type": f.declared_type,
        }
        for name, value in f.properties.items():
            column = property_columns.setdefault(name, f"prop_{name}" if name in BASE_COLUMNS else name)
            row[column] = value
        rows.append(row)
    columns = BASE_COLUMNS + list(property_columns.values())
    if not rows:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(rows, columns=columns)


def to_geojson(features: Iterable[Feature]) -> Dict[str, Any]:
    """Return a GeoJSON FeatureCollection of Point features."""
    return {
        "type": "FeatureCollection",
        "features": [f.__geo_interface__ for f in features],
    }


def to_geodataframe(features: Iterable[Feature], crs: str = "EPSG:4326"):
    """Build a :class:`geopandas.GeoDataFrame` with a Point ``geometry`` column.

    Raises
    ------
    ImportError
        If :mod:`geopandas` or :mod:`shapely` is not installed.
    """
    try:
        import geopandas as gpd  # type: ignore
        from shapely.geometry import Point as ShapelyPoint  # type: ignore
    except ImportError as e:
        raise ImportError(
            "geopandas is required to build a GeoDataFrame. Please install geopandas and its"
            " dependencies (e.g. shapely), for instance with `pip install geojson-featureset[geo]`."
        ) from e

    features = list(features)
    df = to_dataframe(features)
    geometry = [ShapelyPoint(f.geometry.x, f.geometry.y) for f in features]
    return gpd.GeoDataFrame(df, geometry=geometry, crs=crs)


__all__ = ["to_dataframe", "to_geodataframe", "to_geojson", "to_records"]
