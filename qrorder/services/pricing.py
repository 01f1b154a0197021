# qrorder/services/pricing.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

SURTAX_RATE = Decimal("0.10")
_CENT = Decimal("0.01")


def round2(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def compute_totals(line_totals: Iterable[Decimal]) -> dict[str, Decimal]:
    """Subtotal, 10% surtax and total; the total is rounded from the gross sum."""
    subtotal = sum(line_totals, Decimal("0.00"))
    return {
        "subtotal": round2(subtotal),
        "surtax": round2(subtotal * SURTAX_RATE),
        "total": round2(subtotal * (1 + SURTAX_RATE)),
    }
