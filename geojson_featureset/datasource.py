"""
GeoJSON Datasource
==================

The layer a host application talks to.  A :class:`GeoJSONDatasource`
obtains the GeoJSON text (from a file, a URL or an inline string), builds
one :class:`~geojson_featureset.featureset.GeoJSONFeatureset` from it and
then answers the questions a map renderer asks of a datasource:

* what is the extent of the data (:meth:`GeoJSONDatasource.envelope`),
* which attributes do features carry (:meth:`GeoJSONDatasource.fields`),
* which features fall inside a query box (:meth:`GeoJSONDatasource.features`).

Spatial filtering lives here and not in the featureset, which always
returns every feature it parsed.

Example
-------
>>> ds = GeoJSONDatasource(file="stations.geojson")
>>> ds.envelope()
BoundingBox(minx=2.29, miny=48.81, maxx=2.41, maxy=48.9)
>>> [f["name"] for f in ds.features(BoundingBox(2.3, 48.8, 2.35, 48.85))]
['Denfert']
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

from .config import ParserSettings, load_settings
from .downloader import fetch_bytes
from .featureset import FeatureCursor, GeoJSONFeatureset
from .models import BoundingBox, Feature, property_kind

logger = logging.getLogger(__name__)


class GeoJSONDatasource:
    """Point datasource backed by a single GeoJSON document.

    Parameters
    ----------
    file : str or Path, optional
        Path of a GeoJSON file on disk.
    url : str, optional
        HTTP(S) URL of a GeoJSON document.
    inline : str or bytes, optional
        The GeoJSON document itself.
    encoding : str, optional
        Source encoding of the document; defaults to
        ``settings.default_encoding``.
    settings : ParserSettings, optional
        Defaults to :func:`~geojson_featureset.config.load_settings`.

    Raises
    ------
    ValueError
        If not exactly one of ``file``, ``url`` and ``inline`` is given.
    FileNotFoundError
        If ``file`` does not exist.
    RuntimeError
        If ``url`` cannot be downloaded.
    MalformedInput
        If the document is not valid JSON.
    """

    def __init__(
        self,
        file: Optional[Union[str, Path]] = None,
        url: Optional[str] = None,
        inline: Optional[Union[str, bytes]] = None,
        encoding: Optional[str] = None,
        settings: Optional[ParserSettings] = None,
    ) -> None:
        given = [name for name, value in (("file", file), ("url", url), ("inline", inline)) if value is not None]
        if len(given) != 1:
            raise ValueError("Exactly one of 'file', 'url' or 'inline' must be provided")
        self.settings = settings or load_settings()

        if file is not None:
            path = Path(file)
            if not path.is_file():
                raise FileNotFoundError(f"GeoJSON file not found: {file}")
            data: Union[str, bytes] = path.read_bytes()
            self.source = str(path)
        elif url is not None:
            data = fetch_bytes(url, timeout=self.settings.download_timeout)
            self.source = url
        else:
            data = inline
            self.source = "<inline>"

        self.featureset = GeoJSONFeatureset(BoundingBox.world(), data, encoding, self.settings)
        self._envelope = BoundingBox.of_points(f.geometry for f in self.featureset.features)
        logger.debug("Datasource %s: %d features, envelope %s", self.source, len(self), self._envelope)

    def __len__(self) -> int:
        return len(self.featureset)

    def __repr__(self) -> str:
        return f"<GeoJSONDatasource {self.source} ({len(self)} features)>"

    def envelope(self) -> BoundingBox:
        """Extent of all feature points; an empty box when there are none."""
        return self._envelope

    def fields(self) -> Dict[str, str]:
        """Map each property name to the kind of the last value seen for it.

        Names are listed in the order they first appear in the document.
        """
        catalogue: Dict[str, str] = {}
        for feature in self.featureset.features:
            for name, value in feature.properties.items():
                catalogue[name] = property_kind(value)
        return catalogue

    def features(self, query_box: Optional[BoundingBox] = None) -> FeatureCursor:
        """Return a cursor over the features whose point lies in ``query_box``.

        Without a box every feature is returned.
        """
        if query_box is None:
            return self.featureset.features.cursor()
        selected: List[Feature] = [
            f for f in self.featureset.features if query_box.contains(f.geometry)
        ]
        logger.debug("Query %s matched %d of %d features", query_box, len(selected), len(self))
        return FeatureCursor(selected)

    def features_at_point(self, x: float, y: float, tolerance: float = 0.0) -> FeatureCursor:
        """Features located within ``tolerance`` (in both axes) of ``(x, y)``."""
        if tolerance < 0:
            raise ValueError("tolerance must not be negative")
        box = BoundingBox(x, y, x, y).pad(tolerance)
        return self.features(box)


__all__ = ["GeoJSONDatasource"]
