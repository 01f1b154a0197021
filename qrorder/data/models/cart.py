# qrorder/data/models/cart.py
from dataclasses import dataclass, field
from decimal import Decimal


@dataclass
class CartLine:
    item_id: str
    name: str
    quantity: int
    unit_price: Decimal
    modifiers: frozenset[str] = field(default_factory=frozenset)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class GuestCart:
    """One guest's pending lines, keyed by item identity."""

    display_name: str | None = None
    lines: dict[str, CartLine] = field(default_factory=dict)
