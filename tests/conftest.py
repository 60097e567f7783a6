import json

import pytest

from geojson_featureset.config import ParserSettings


def collection(*features):
    return json.dumps({"type": "FeatureCollection", "features": list(features)})


def point_feature(x, y, /, **properties):
    return {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [x, y]},
        "properties": properties,
    }


@pytest.fixture
def settings():
    return ParserSettings()


@pytest.fixture
def stations_text():
    return collection(
        point_feature(2.3324, 48.8339, name="Denfert", lines=4.0, open=True),
        point_feature(2.3731, 48.8448, name="Gare de Lyon", lines=5.0, open=True),
        point_feature(2.2945, 48.8584, name="Champ de Mars", lines=1.0, open=False, note=None),
    )
