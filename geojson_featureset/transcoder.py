"""
Text Transcoder
===============

The tokenizer only understands UTF-8, while GeoJSON files found in the
wild are occasionally written in a legacy encoding.  A :class:`Transcoder`
bridges the two: it decodes the raw source bytes with the declared
encoding, re-encodes them as UTF-8 chunks for the tokenizer, and turns the
strings coming back out of the tokenizer into the canonical form stored
on features (NFC-normalised ``str``).

Every parse owns exactly one transcoder; there is no shared default
instance.

Example
-------
>>> tr = Transcoder("latin-1")
>>> b"".join(tr.iter_utf8(b'{"name": "caf\\xe9"}', 4)).decode("utf-8")
'{"name": "café"}'
"""

from __future__ import annotations

import codecs
import unicodedata
from typing import Iterator, Union

from .errors import MalformedInput


class Transcoder:
    """Convert source text in ``encoding`` into canonical Python strings.

    Parameters
    ----------
    encoding : str
        Any codec name known to :mod:`codecs`.  A UTF-8 source may start
        with a byte order mark, which is dropped.

    Raises
    ------
    ValueError
        If ``encoding`` is not a known codec.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        try:
            info = codecs.lookup(encoding)
        except LookupError as exc:
            raise ValueError(f"Unknown source encoding '{encoding}'") from exc
        self.encoding = info.name
        # utf-8-sig decodes plain UTF-8 too and strips a leading BOM
        self._decoder_name = "utf-8-sig" if info.name == "utf-8" else info.name

    def __repr__(self) -> str:
        return f"Transcoder({self.encoding!r})"

    def iter_utf8(self, data: Union[str, bytes], chunk_size: int) -> Iterator[bytes]:
        """Yield ``data`` as UTF-8 encoded chunks of roughly ``chunk_size`` bytes.

        ``str`` input is already decoded and is only encoded, less a leading
        byte order mark.  ``bytes`` input is decoded incrementally with the
        source encoding.

        Raises
        ------
        MalformedInput
            If the bytes cannot be decoded with the source encoding.
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if isinstance(data, str):
            if data.startswith("\ufeff"):
                data = data[1:]
            encoded = data.encode("utf-8")
            for start in range(0, len(encoded), chunk_size):
                yield encoded[start:start + chunk_size]
            return

        decoder = codecs.getincrementaldecoder(self._decoder_name)("strict")
        total = len(data)
        for start in range(0, total, chunk_size):
            end = start + chunk_size
            try:
                text = decoder.decode(data[start:end], final=end >= total)
            except UnicodeDecodeError as exc:
                raise MalformedInput(
                    f"cannot decode input as {self.encoding}: {exc.reason}",
                    offset=start + exc.start,
                ) from exc
            if text:
                yield text.encode("utf-8")

    def transcode(self, text: str) -> str:
        """Return the canonical (NFC) form of a decoded string."""
        return unicodedata.normalize("NFC", text)


__all__ = ["Transcoder"]
