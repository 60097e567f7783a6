import pytest

from geojson_featureset import MalformedInput
from geojson_featureset.transcoder import Transcoder


def joined(transcoder, data, size):
    return b"".join(transcoder.iter_utf8(data, size)).decode("utf-8")


def test_latin1_bytes_become_utf8():
    assert joined(Transcoder("latin-1"), '"Zürich"'.encode("latin-1"), 2) == '"Zürich"'


def test_multibyte_characters_split_across_chunks():
    text = '{"name": "東京 – Ōsaka"}'
    assert joined(Transcoder("utf-8"), text.encode("utf-8"), 1) == text


def test_str_input_is_only_encoded():
    chunks = list(Transcoder("latin-1").iter_utf8("ab€", 2))
    assert b"".join(chunks) == "ab€".encode("utf-8")
    assert all(len(c) <= 2 for c in chunks)


def test_utf8_bom_is_dropped():
    assert joined(Transcoder("utf-8"), b"\xef\xbb\xbf[1]", 16) == "[1]"


def test_bom_is_dropped_from_str_input():
    assert joined(Transcoder("utf-8"), "\ufeff[1]", 16) == "[1]"
    assert joined(Transcoder("latin-1"), "[\ufeff]", 16) == "[\ufeff]"


def test_invalid_bytes_raise_malformed_input():
    with pytest.raises(MalformedInput) as excinfo:
        joined(Transcoder("utf-8"), b'["ok", "\xff"]', 4)
    assert excinfo.value.offset == 8
    assert "cannot decode input as utf-8" in str(excinfo.value)


def test_unknown_encoding():
    with pytest.raises(ValueError):
        Transcoder("klingon-8")


def test_encoding_name_is_normalised():
    assert Transcoder("UTF8").encoding == "utf-8"
    assert Transcoder("cp1252").encoding == "cp1252"


def test_transcode_normalises_to_nfc():
    assert Transcoder().transcode("e\u0301") == "\u00e9"


def test_chunk_size_must_be_positive():
    with pytest.raises(ValueError):
        list(Transcoder().iter_utf8("x", 0))


def test_empty_input_yields_nothing():
    assert list(Transcoder().iter_utf8(b"", 8)) == []
