from datetime import datetime, timedelta, timezone
from decimal import Decimal

from qrorder.data.models.ticket import Ticket, TicketItem
from qrorder.services.status_engine import StatusWindows
from qrorder.utils.clock import Clock

# a Saturday evening service
T0 = datetime(2026, 3, 14, 19, 0, tzinfo=timezone.utc)

WINDOWS = StatusWindows(
    auto_print_buffer=timedelta(seconds=120),
    preparation_window=timedelta(minutes=20),
    pay_clear_window=timedelta(seconds=30),
    new_order_window=timedelta(minutes=3),
)


class FrozenClock(Clock):
    def __init__(self, start: datetime = T0):
        super().__init__("UTC")
        self.current = start

    def now(self) -> datetime:
        return self.current

    def set(self, when: datetime) -> datetime:
        self.current = when
        return when

    def advance(self, **kwargs) -> datetime:
        self.current = self.current + timedelta(**kwargs)
        return self.current


def make_ticket(created_at=T0, printed_at=None, paid_at=None, table="T1") -> Ticket:
    item = TicketItem(item_id="m1", name="Margherita", quantity=1, unit_price=Decimal("8.50"))
    return Ticket(
        id="TCK1",
        table=table,
        items=(item,),
        subtotal=Decimal("8.50"),
        surtax=Decimal("0.85"),
        total=Decimal("9.35"),
        created_at=created_at,
        business_day=created_at.date().isoformat(),
        printed_at=printed_at,
        paid_at=paid_at,
    )
