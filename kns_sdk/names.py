"""
Name parsing and normalization.

A *name* is ``<second-level domain>.<top-level domain>`` (``example.hh``). A
*record name* may carry any number of leading labels in front of a name
(``test.example.hh``); an empty record name denotes the name itself.

The TLD ``h`` is an alias of ``ℏ``: ``example.h`` and ``example.ℏ`` are the same
registry key everywhere, so normalized forms always carry ``ℏ``.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import InvalidNameFormat, InvalidRecordNameFormat

__all__ = [
    "HBAR_TLD",
    "ParsedName",
    "ParsedRecordName",
    "parse_name",
    "parse_record_name",
    "format_name",
    "format_record_name",
    "normalize_name",
    "normalize_record_name",
]

HBAR_TLD = "ℏ"

_TLD_ALIASES = {"h": HBAR_TLD}


def _unalias_tld(tld: str) -> str:
    return _TLD_ALIASES.get(tld, tld)


@dataclass(frozen=True)
class ParsedName:
    second_level_domain: str
    top_level_domain: str

    def __str__(self) -> str:
        return format_name(self)


@dataclass(frozen=True)
class ParsedRecordName(ParsedName):
    record_name: str = ""

    @property
    def domain(self) -> ParsedName:
        """The registered name this record belongs to."""
        return ParsedName(self.second_level_domain, self.top_level_domain)

    def __str__(self) -> str:
        return format_record_name(self)


def parse_name(name: str) -> ParsedName:
    parts = name.strip().split(".")
    if len(parts) != 2 or not all(parts):
        raise InvalidNameFormat(name)
    return ParsedName(
        second_level_domain=parts[0],
        top_level_domain=_unalias_tld(parts[1]),
    )


def parse_record_name(name: str) -> ParsedRecordName:
    parts = name.strip().split(".")
    if len(parts) < 2 or not parts[-2] or not parts[-1]:
        raise InvalidRecordNameFormat(name)
    return ParsedRecordName(
        second_level_domain=parts[-2],
        top_level_domain=_unalias_tld(parts[-1]),
        record_name=".".join(parts[:-2]),
    )


def format_name(parsed: ParsedName) -> str:
    return f"{parsed.second_level_domain}.{parsed.top_level_domain}"


def format_record_name(parsed: ParsedRecordName) -> str:
    name = format_name(parsed)
    if parsed.record_name:
        name = f"{parsed.record_name}.{name}"
    return name


def normalize_name(name: str) -> str:
    return format_name(parse_name(name))


def normalize_record_name(name: str) -> str:
    return format_record_name(parse_record_name(name))
