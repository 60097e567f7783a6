"""
Token Source
============

Thin adaptor around the ijson push parser.  The featureset never sees raw
text: it is fed UTF-8 chunks, ijson turns them into low-level events and
each event is handed, one at a time and in document order, to a handler
object exposing ``handle(event, value)``.

Event names are ijson's own: ``start_map``, ``map_key``, ``end_map``,
``start_array``, ``end_array``, ``null``, ``boolean``, ``number`` (ints
and floats, requested with ``use_float``) and ``string``.

Two leniencies are expected by the featureset and are on by default:

* **comments** – handed to ijson as ``allow_comments``.  Every yajl based
  backend supports them; the pure-python backend does not, in which case
  a warning is logged and a comment in the input is reported as malformed.
* **trailing garbage** – once the top-level value has been closed, any
  further tokenizer error is logged and ignored and no more input is fed.

Any other tokenizer error is raised as :class:`~geojson_featureset.errors.MalformedInput`.
An integer literal too large for the yajl backends is reported as
:class:`IntegerOverflow`, a subclass, so the caller can retry with the
pure-python backend.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional, Protocol, Tuple

import ijson

from ..config import ParserSettings
from ..errors import MalformedInput

logger = logging.getLogger(__name__)

_OPENERS = frozenset({"start_map", "start_array"})
_CLOSERS = frozenset({"end_map", "end_array"})


class IntegerOverflow(MalformedInput):
    """The yajl backends reject integer literals that do not fit in 64 bits."""


class EventHandler(Protocol):
    def handle(self, event: str, value: Any) -> None:
        ...


class _EventRelay:
    """ijson target forwarding events to a handler until the top-level value closes."""

    def __init__(self, handler: EventHandler) -> None:
        self._handler = handler
        self._depth = 0
        self.events = 0
        self.finished = False

    def send(self, item: Tuple[str, Any]) -> None:
        if self.finished:
            return
        event, value = item
        self.events += 1
        if event in _OPENERS:
            self._depth += 1
        elif event in _CLOSERS:
            self._depth -= 1
        self._handler.handle(event, value)
        if self._depth == 0:
            self.finished = True


class TokenSource:
    """Feed UTF-8 chunks through ijson and dispatch the resulting events.

    Parameters
    ----------
    settings : ParserSettings, optional
        Leniency flags and backend selection.  Defaults to
        ``ParserSettings()``.

    Raises
    ------
    ImportError
        If ``settings.backend`` names an ijson backend that is not
        available on this interpreter.
    """

    def __init__(self, settings: Optional[ParserSettings] = None) -> None:
        self.settings = settings or ParserSettings()
        # ijson.backend is the name of the backend picked at import time
        self.backend_name = self.settings.backend or ijson.backend
        self.backend = ijson.get_backend(self.backend_name)

    @property
    def supports_comments(self) -> bool:
        return self.backend_name != "python"

    def _parser_config(self) -> dict:
        config = {"use_float": True}
        if self.settings.allow_comments:
            if self.supports_comments:
                config["allow_comments"] = True
            else:
                logger.warning(
                    "ijson backend %r cannot skip comments; comments in the input will be rejected",
                    self.backend_name,
                )
        return config

    def parse(self, chunks: Iterable[bytes], handler: EventHandler) -> int:
        """Tokenize ``chunks`` and dispatch every event to ``handler``.

        Returns
        -------
        int
            Number of events dispatched.

        Raises
        ------
        MalformedInput
            If the chunks do not form a valid JSON value.
        """
        relay = _EventRelay(handler)
        coro = self.backend.basic_parse_coro(relay, **self._parser_config())
        lenient_tail = self.settings.allow_trailing_garbage
        offset = 0
        try:
            for chunk in chunks:
                if relay.finished and lenient_tail:
                    break
                offset += len(chunk)
                coro.send(chunk)
            coro.close()
        except ijson.JSONError as exc:
            if relay.finished and lenient_tail:
                logger.debug("Ignoring content after the top-level value: %s", exc)
                return relay.events
            reason = str(exc) or type(exc).__name__
            if "integer overflow" in reason:
                raise IntegerOverflow(reason, offset=offset) from exc
            raise MalformedInput(reason, offset=offset) from exc
        return relay.events


__all__ = ["EventHandler", "IntegerOverflow", "TokenSource"]
