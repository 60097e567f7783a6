"""Runtime settings for the GeoJSON featureset parser.

Settings are read from ``GEOJSON_FEATURESET_*`` environment variables by
:func:`load_settings` and validated with pydantic.  Callers that need a
different configuration for a single parse can build a
:class:`ParserSettings` directly and hand it to the featureset or
datasource.
"""

from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

ENV_PREFIX = "GEOJSON_FEATURESET_"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ParserSettings(BaseModel):
    """Tokenizer and I/O options.

    Attributes
    ----------
    allow_comments : bool
        Accept ``/* */`` and ``//`` comments in the input.
    allow_trailing_garbage : bool
        Ignore anything following the top-level JSON value.
    chunk_size : int
        Number of bytes handed to the tokenizer per feed call.  The result
        of a parse never depends on it.
    backend : Optional[str]
        Name of the ijson backend to use (``yajl2_c``, ``python``, ...).
        ``None`` keeps ijson's own choice.
    default_encoding : str
        Encoding assumed for byte input when none is given.
    download_timeout : float
        Timeout in seconds for remote GeoJSON downloads.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    allow_comments: bool = True
    allow_trailing_garbage: bool = True
    chunk_size: int = Field(default=65536, gt=0)
    backend: Optional[str] = None
    default_encoding: str = "utf-8"
    download_timeout: float = Field(default=15.0, gt=0)

    @field_validator("allow_comments", "allow_trailing_garbage", mode="before")
    @classmethod
    def _parse_flag(cls, value):
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ValueError(f"expected a boolean flag, got {value!r}")
        return value

    @field_validator("backend", mode="before")
    @classmethod
    def _blank_backend(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ParserSettings:
    """Build :class:`ParserSettings` from environment variables.

    Only variables that are set are passed on, so unset ones keep their
    defaults.  ``environ`` defaults to :data:`os.environ`.
    """
    if environ is None:
        environ = os.environ
    values = {}
    for name in ParserSettings.model_fields:
        raw = environ.get(ENV_PREFIX + name.upper())
        if raw is not None:
            values[name] = raw
    return ParserSettings(**values)


__all__ = ["ENV_PREFIX", "ParserSettings", "load_settings"]
