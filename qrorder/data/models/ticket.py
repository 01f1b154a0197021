# qrorder/data/models/ticket.py
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True)
class TicketItem:
    item_id: str
    name: str
    quantity: int
    unit_price: Decimal
    owner_name: str | None = None
    modifiers: frozenset[str] = field(default_factory=frozenset)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class Ticket:
    """An order placed for a table.

    Only ``printed_at`` and ``paid_at`` change after creation, and only
    through OrderService while holding the table lock.
    """

    id: str
    table: str
    items: tuple[TicketItem, ...]
    subtotal: Decimal
    surtax: Decimal
    total: Decimal
    created_at: datetime
    business_day: str
    owner_name: str | None = None
    printed_at: datetime | None = None
    paid_at: datetime | None = None
