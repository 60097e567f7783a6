"""
GeoJSON Featureset
==================

:class:`GeoJSONFeatureset` is the entry point of the package.  Building
one parses the whole input in a single forward pass: the text is
transcoded to UTF-8, fed to the ijson token source chunk by chunk, and
every token event goes through the parse state machine, which fills the
feature accumulator.  Finished features are buffered in an append-only
:class:`FeatureSequence` and become retrievable only once the constructor
returns.

Parsing is all-or-nothing.  If the tokenizer reports malformed JSON the
constructor raises :class:`~geojson_featureset.errors.MalformedInput` and
the features read so far are discarded.

Example
-------
>>> fs = GeoJSONFeatureset(BoundingBox.world(), '{"type": "FeatureCollection", "features": []}')
>>> fs.next() is None
True

Known limitations
-----------------
- Every feature is emitted as a point at the first coordinate pair of its
  geometry, whatever the declared geometry type.
- Property values that are objects or arrays are skipped.
- The bounding box is accepted for interface compatibility only; use
  :class:`~geojson_featureset.datasource.GeoJSONDatasource` for spatial
  filtering.
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence, Union, overload

from .config import ParserSettings
from .models import BoundingBox, Feature
from .parsers.accumulator import FeatureAccumulator
from .parsers.state_machine import ParseState, ParseStateMachine
from .parsers.token_source import IntegerOverflow, TokenSource
from .transcoder import Transcoder

logger = logging.getLogger(__name__)


class FeatureSequence(Sequence[Feature]):
    """Ordered, append-only store of finished features.

    The parser appends to it; :meth:`seal` is called once parsing is done,
    after which the sequence is read-only and may be shared freely between
    readers, each using its own :meth:`cursor`.
    """

    def __init__(self) -> None:
        self._features: List[Feature] = []
        self._sealed = False

    def append(self, feature: Feature) -> None:
        if self._sealed:
            raise RuntimeError("FeatureSequence is sealed; no more features can be appended")
        self._features.append(feature)

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    @overload
    def __getitem__(self, index: int) -> Feature: ...

    @overload
    def __getitem__(self, index: slice) -> List[Feature]: ...

    def __getitem__(self, index):
        return self._features[index]

    def __len__(self) -> int:
        return len(self._features)

    def cursor(self) -> "FeatureCursor":
        return FeatureCursor(self)

    def __repr__(self) -> str:
        return f"<FeatureSequence {len(self)} features{' sealed' if self._sealed else ''}>"


class FeatureCursor:
    """Forward-only, one-shot reader over a :class:`FeatureSequence`."""

    def __init__(self, sequence: Sequence[Feature]) -> None:
        self._sequence = sequence
        self._position = 0

    def next(self) -> Optional[Feature]:
        """Return the next feature, or ``None`` once all have been returned."""
        if self._position >= len(self._sequence):
            return None
        feature = self._sequence[self._position]
        self._position += 1
        return feature

    def __iter__(self) -> "FeatureCursor":
        return self

    def __next__(self) -> Feature:
        feature = self.next()
        if feature is None:
            raise StopIteration
        return feature


class GeoJSONFeatureset:
    """Parse a GeoJSON ``FeatureCollection`` into point features.

    Parameters
    ----------
    box : BoundingBox
        Query extent of the caller.  Stored for reference, never used to
        filter.
    input_text : str or bytes
        The whole GeoJSON document.  ``bytes`` are decoded with
        ``encoding``; ``str`` is taken as already decoded.
    encoding : str, optional
        Encoding of ``input_text`` when given as bytes.  Defaults to
        ``settings.default_encoding``.
    settings : ParserSettings, optional
        Tokenizer leniency and chunking options.

    Raises
    ------
    MalformedInput
        If the input is not valid JSON (or cannot be decoded).
    ValueError
        If ``encoding`` is not a known codec.
    """

    def __init__(
        self,
        box: BoundingBox,
        input_text: Union[str, bytes],
        encoding: Optional[str] = None,
        settings: Optional[ParserSettings] = None,
    ) -> None:
        self.settings = settings or ParserSettings()
        self.box = box
        transcoder = Transcoder(encoding or self.settings.default_encoding)
        self.encoding = transcoder.encoding

        source = TokenSource(self.settings)
        try:
            sequence = self._parse(source, transcoder, input_text)
        except IntegerOverflow:
            if source.backend_name == "python":
                raise
            logger.warning(
                "ijson backend %r cannot hold an integer literal of the input; "
                "parsing again with the python backend",
                source.backend_name,
            )
            fallback = TokenSource(self.settings.model_copy(update={"backend": "python"}))
            sequence = self._parse(fallback, transcoder, input_text)

        self.features = sequence
        self._cursor = sequence.cursor()

    def _parse(self, source: TokenSource, transcoder: Transcoder, input_text: Union[str, bytes]) -> FeatureSequence:
        sequence = FeatureSequence()
        machine = ParseStateMachine(FeatureAccumulator(sequence), transcoder)

        logger.debug(
            "Parsing %d %s of GeoJSON with the %s backend",
            len(input_text),
            "bytes" if isinstance(input_text, bytes) else "characters",
            source.backend_name,
        )
        events = source.parse(transcoder.iter_utf8(input_text, self.settings.chunk_size), machine)
        sequence.seal()
        if machine.state is not ParseState.OUTSIDE:
            logger.debug("Input ended in parser state %s", machine.state.value)
        logger.info("Parsed %d feature(s) from %d token events", len(sequence), events)
        return sequence

    def next(self) -> Optional[Feature]:
        """Return the next feature by ascending id, or ``None`` when exhausted."""
        return self._cursor.next()

    def __iter__(self) -> Iterator[Feature]:
        return self.features.cursor()

    def __len__(self) -> int:
        return len(self.features)

    def __repr__(self) -> str:
        return f"<GeoJSONFeatureset {len(self)} features encoding={self.encoding!r}>"


__all__ = ["FeatureCursor", "FeatureSequence", "GeoJSONFeatureset"]
