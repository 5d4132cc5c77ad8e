"""
Registration pricing.

Price policy (USD per year)
---------------------------
The purchasable label (the second-level domain) is classified by its UTF-8
*byte* length, not its character count:

==========  =====
bytes       price
==========  =====
0           infinite (not registrable)
1           500
2           50
3+          5
==========  =====

A label containing any non-ASCII byte (>= 0x80) costs double its tier. One
Hangul syllable is 3 bytes and therefore prices as ``3+`` (10 after doubling);
an emoji is 4 bytes and prices the same way.

Conversion to HBAR divides by the current USD-per-HBAR rate and rounds *up*
to `HBAR_PRICE_DECIMALS` places, so a quoted price never under-pays the
contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_UP, Decimal
from typing import Final, Mapping, Union

from .names import parse_record_name
from .utils.bytes import utf8_encode

__all__ = [
    "PriceSchedule",
    "DEFAULT_SCHEDULE",
    "HBAR_PRICE_DECIMALS",
    "label_of",
    "is_ascii_label",
    "get_register_price_usd",
    "get_register_price_hbar",
]

HBAR_PRICE_DECIMALS: Final[int] = 4

INFINITE_PRICE: Final[Decimal] = Decimal("Infinity")


@dataclass(frozen=True)
class PriceSchedule:
    """
    Tiered USD price keyed by label byte length.

    Attributes
    ----------
    tiers:
        Exact byte length -> price. Lengths above the largest key use
        `default`.
    default:
        Price for labels longer than every explicit tier.
    non_ascii_multiplier:
        Applied once to the tier price when the label has a non-ASCII byte.
    """

    tiers: Mapping[int, Decimal]
    default: Decimal
    non_ascii_multiplier: Decimal = Decimal(2)

    def tier_price(self, byte_length: int) -> Decimal:
        return self.tiers.get(byte_length, self.default)


DEFAULT_SCHEDULE: Final[PriceSchedule] = PriceSchedule(
    tiers={1: Decimal(500), 2: Decimal(50)},
    default=Decimal(5),
)


def label_of(name: str) -> str:
    """Reduce ``example.hh`` or ``www.example.hh`` to ``example``; a bare label is returned as-is."""
    if "." in name:
        return parse_record_name(name).second_level_domain
    return name


def is_ascii_label(encoded: bytes) -> bool:
    return all(b < 0x80 for b in encoded)


def get_register_price_usd(name: str, schedule: PriceSchedule = DEFAULT_SCHEDULE) -> Decimal:
    encoded = utf8_encode(label_of(name))
    if not encoded:
        return INFINITE_PRICE
    price = schedule.tier_price(len(encoded))
    if not is_ascii_label(encoded):
        price *= schedule.non_ascii_multiplier
    return price


def get_register_price_hbar(
    price_usd: Decimal, usd_per_hbar: Union[Decimal, int, float, str]
) -> Decimal:
    """Convert a USD price to HBAR at `usd_per_hbar`, rounding up to 4 places."""
    rate = Decimal(str(usd_per_hbar))
    if not rate.is_finite() or rate <= 0:
        raise ValueError(f"exchange rate must be a positive number, got {usd_per_hbar!r}")
    if price_usd.is_infinite():
        return INFINITE_PRICE
    quantum = Decimal(1).scaleb(-HBAR_PRICE_DECIMALS)
    return (price_usd / rate).quantize(quantum, rounding=ROUND_UP)
