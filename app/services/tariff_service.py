"""
Slab tariff calculation.

Each connection type is a list of (upper_bound, marginal_rate) slabs. A slab's
rate applies only to the units above the previous slab's upper bound, up to and
including its own; the last slab is open-ended (upper_bound None). Adding a
connection type is a new entry in TARIFF_SLABS.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Tuple

from app.core.exceptions import InvalidConnectionType
from app.models.enums import ConnectionType
from app.schemas.billing import SlabCharge, TariffCard, TariffSlab

Slab = Tuple[Optional[int], Decimal]

TARIFF_SLABS: Dict[ConnectionType, List[Slab]] = {
    ConnectionType.DOMESTIC: [
        (100, Decimal("3.5")),
        (200, Decimal("4.5")),
        (300, Decimal("6.5")),
        (None, Decimal("8.5")),
    ],
    ConnectionType.COMMERCIAL: [
        (100, Decimal("5.5")),
        (300, Decimal("7.5")),
        (None, Decimal("9.5")),
    ],
    ConnectionType.INDUSTRIAL: [
        (None, Decimal("8.0")),
    ],
}

CENT = Decimal("0.01")


def _slabs_for(connection_type) -> List[Slab]:
    try:
        return TARIFF_SLABS[ConnectionType(connection_type)]
    except (ValueError, KeyError):
        raise InvalidConnectionType(connection_type)


def slab_breakdown(units: int, connection_type) -> List[SlabCharge]:
    """
    Split units across the tariff slabs of a connection type.

    Only slabs that actually bill units are returned; units = 0 yields an
    empty list. Charges are unrounded.
    """
    slabs = _slabs_for(connection_type)
    lines: List[SlabCharge] = []
    lower = 0
    for upper, rate in slabs:
        if units <= lower:
            break
        top = units if upper is None else min(units, upper)
        billed = top - lower
        lines.append(
            SlabCharge(
                lower_bound=lower,
                upper_bound=upper,
                units=billed,
                rate=rate,
                charge=rate * billed,
            )
        )
        if upper is None:
            break
        lower = upper
    return lines


def compute_amount(units: int, connection_type) -> Decimal:
    """
    Amount billed for `units` on `connection_type`, rounded half-up to 2 places.

    Input validation is the caller's job; this only rejects unknown
    connection types (InvalidConnectionType).
    """
    total = sum((line.charge for line in slab_breakdown(units, connection_type)), Decimal("0"))
    return total.quantize(CENT, rounding=ROUND_HALF_UP)


def describe_tariffs() -> List[TariffCard]:
    """Public rate card, one entry per connection type."""
    cards = []
    for connection_type, slabs in TARIFF_SLABS.items():
        lower = 0
        rows = []
        for upper, rate in slabs:
            rows.append(TariffSlab(lower_bound=lower, upper_bound=upper, rate=rate))
            lower = upper if upper is not None else lower
        cards.append(TariffCard(connection_type=connection_type, slabs=rows))
    return cards
