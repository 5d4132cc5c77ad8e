import pytest

from kns_sdk.errors import InvalidNameFormat, InvalidRecordNameFormat, KnsError
from kns_sdk.names import (HBAR_TLD, ParsedName, ParsedRecordName, format_name,
                           format_record_name, normalize_name,
                           normalize_record_name, parse_name,
                           parse_record_name)


def test_parse_name():
    assert parse_name("example.hh") == ParsedName("example", "hh")


def test_parse_name_aliases_h_tld():
    assert parse_name("example.h").top_level_domain == HBAR_TLD
    assert parse_name("example.h") == parse_name("example.ℏ")
    assert normalize_name("example.h") == "example.ℏ"


def test_parse_name_strips_whitespace():
    assert parse_name("  example.hh \n") == ParsedName("example", "hh")


@pytest.mark.parametrize("name", ["bad", "a..b", ".hh", "example.", "sub.example.hh", ""])
def test_parse_name_rejects(name):
    with pytest.raises(InvalidNameFormat) as ei:
        parse_name(name)
    assert ei.value.name == name
    assert isinstance(ei.value, KnsError)


def test_parse_record_name():
    parsed = parse_record_name("sub.example.hh")
    assert parsed == ParsedRecordName("example", "hh", "sub")
    assert parsed.domain == ParsedName("example", "hh")


def test_parse_record_name_without_record():
    parsed = parse_record_name("example.hh")
    assert parsed.record_name == ""
    assert format_record_name(parsed) == "example.hh"


def test_parse_record_name_keeps_nested_labels():
    parsed = parse_record_name("a.b.example.h")
    assert parsed.record_name == "a.b"
    assert parsed.top_level_domain == HBAR_TLD
    assert normalize_record_name("a.b.example.h") == "a.b.example.ℏ"


@pytest.mark.parametrize("name", ["bad", "example..hh", "sub.example.", ""])
def test_parse_record_name_rejects(name):
    with pytest.raises(InvalidRecordNameFormat):
        parse_record_name(name)


def test_format_roundtrip():
    for name in ("example.hh", "x.ℏ"):
        assert format_name(parse_name(name)) == name
    assert str(parse_record_name("www.example.hh")) == "www.example.hh"
