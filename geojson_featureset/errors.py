"""Exception types raised by :mod:`geojson_featureset`.

Only one failure is part of the parsing contract: :class:`MalformedInput`,
raised when the tokenizer reports that the byte stream is not valid JSON
at the current position.  GeoJSON ingestion is all-or-nothing, so the
exception is raised from the featureset constructor and no partial
feature list ever reaches the caller.
"""

from __future__ import annotations

from typing import Optional


class FeaturesetError(Exception):
    """Base class for errors raised by this package."""


class MalformedInput(FeaturesetError, ValueError):
    """The input text does not form valid JSON.

    Attributes
    ----------
    reason : str
        Description of the offending region as reported by the tokenizer
        (or the text decoder when the source bytes cannot be decoded).
    offset : Optional[int]
        Number of bytes handed to the tokenizer when the error surfaced.
    """

    def __init__(self, reason: str, offset: Optional[int] = None) -> None:
        self.reason = reason.strip()
        self.offset = offset
        message = f"invalid GeoJSON detected: {self.reason}"
        if offset is not None:
            message += f" (near byte {offset})"
        super().__init__(message)


__all__ = ["FeaturesetError", "MalformedInput"]
