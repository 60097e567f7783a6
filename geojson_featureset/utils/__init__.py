"""Utility helpers for the geojson_featureset package.

This subpackage holds small, general purpose helpers that are not part
of the parsing core, such as the logging setup used by the HTTP
application (``logging_utils``).
"""

from .logging_utils import configure_logging

__all__ = ["configure_logging"]
