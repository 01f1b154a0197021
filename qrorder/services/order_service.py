# qrorder/services/order_service.py
from dataclasses import replace
from datetime import date, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List

from qrorder.data.models.ticket import Ticket, TicketItem
from qrorder.domain.errors import InvalidInput
from qrorder.domain.status import TableStatus
from qrorder.repos.table_state_repo import TableStateRepo
from qrorder.repos.ticket_repo import TicketRepo
from qrorder.services.business_day import business_day_key
from qrorder.services.lock_service import LockService
from qrorder.services.menu_catalog import MenuCatalog
from qrorder.services.pricing import compute_totals
from qrorder.services.status_engine import DEFAULT_WINDOWS, StatusWindows, derive_status
from qrorder.utils.clock import Clock
from qrorder.utils.logging import get_logger
from qrorder.utils.settings import BUSINESS_DAY_ROLLOVER_HOUR, TICKET_RETENTION_DAYS

logger = get_logger(__name__)

FALLBACK_ITEM_NAME = "Article"


def ticket_item_to_dict(item: TicketItem) -> Dict[str, Any]:
    return {
        "item_id": item.item_id,
        "name": item.name,
        "quantity": item.quantity,
        "unit_price": item.unit_price,
        "owner_name": item.owner_name,
        "modifiers": sorted(item.modifiers),
    }


def ticket_to_dict(ticket: Ticket) -> Dict[str, Any]:
    return {
        "id": ticket.id,
        "table": ticket.table,
        "items": [ticket_item_to_dict(i) for i in ticket.items],
        "subtotal": ticket.subtotal,
        "surtax": ticket.surtax,
        "total": ticket.total,
        "owner_name": ticket.owner_name,
        "created_at": ticket.created_at,
        "business_day": ticket.business_day,
        "printed_at": ticket.printed_at,
        "paid_at": ticket.paid_at,
    }


def require_table(table: str | None) -> str:
    t = str(table or "").strip()
    if not t:
        raise InvalidInput("missing table")
    return t


class OrderService:
    """
    Tickets and the staff actions on them.

    Commands (create, print, pay, cancel payment) run under the table lock;
    the day summary only reads.
    """

    def __init__(
        self,
        ticket_repo: TicketRepo,
        table_state_repo: TableStateRepo,
        menu: MenuCatalog,
        lock_service: LockService,
        clock: Clock,
        windows: StatusWindows = DEFAULT_WINDOWS,
        rollover_hour: int = BUSINESS_DAY_ROLLOVER_HOUR,
        retention_days: int = TICKET_RETENTION_DAYS,
    ):
        self.repo = ticket_repo
        self.table_states = table_state_repo
        self.menu = menu
        self.lock_service = lock_service
        self.clock = clock
        self.windows = windows
        self.rollover_hour = rollover_hour
        self.retention_days = retention_days

    def business_day(self, now: datetime) -> str:
        return business_day_key(now, self.rollover_hour, self.clock.tz)

    # query
    def day_summary(self, now: datetime | None = None) -> List[Dict[str, Any]]:
        now = now or self.clock.now()
        tickets = self.repo.for_business_day(self.business_day(now))
        summary = []
        for t in tickets:
            row = ticket_to_dict(t)
            row["time"] = t.created_at.astimezone(self.clock.tz).strftime("%H:%M")
            row["status"] = derive_status(t, now, self.windows)
            summary.append(row)
        return summary

    def latest_ticket(self, table: str, now: datetime | None = None) -> Ticket | None:
        now = now or self.clock.now()
        return self.repo.latest_for_table(table, self.business_day(now))

    # commands
    def create_ticket(
        self,
        table: str,
        items: Iterable[Dict[str, Any]] | None,
        owner_name: str | None = None,
        now: datetime | None = None,
    ) -> Ticket:
        """
        Ticket from a manual item list.

        Name and price come from the menu when the item id is known,
        otherwise from the caller.
        """
        table = require_table(table)
        raw_items = list(items or [])
        if not raw_items:
            raise InvalidInput("empty items")

        resolved = [self._resolve_item(it) for it in raw_items]
        return self.place_ticket(table, resolved, owner_name=owner_name, now=now)

    def place_ticket(
        self,
        table: str,
        items: List[TicketItem],
        owner_name: str | None = None,
        now: datetime | None = None,
    ) -> Ticket:
        """Append a ticket built from already-resolved items and open the table session."""
        table = require_table(table)
        if not items:
            raise InvalidInput("empty items")

        with self.lock_service.table_lock(table):
            now = now or self.clock.now()
            totals = compute_totals(i.line_total for i in items)

            ticket = Ticket(
                id=self.repo.next_id(),
                table=table,
                items=tuple(items),
                subtotal=totals["subtotal"],
                surtax=totals["surtax"],
                total=totals["total"],
                created_at=now,
                business_day=self.business_day(now),
                owner_name=owner_name,
            )

            # placing an order always reopens / continues the table
            state = self.table_states.get(table)
            new_state = replace(
                state,
                closed_manually=False,
                session_start_at=state.session_start_at or ticket.created_at,
            )

            self.repo.add(ticket)
            self.table_states.save(table, new_state)

        logger.info(
            f"Ticket {ticket.id} created for table {table}: "
            f"{len(ticket.items)} lines, total {ticket.total}"
        )
        if state.session_start_at is None:
            logger.info(f"Session opened on table {table} at {ticket.created_at.isoformat()}")

        self._apply_retention(ticket.business_day)
        return ticket

    def mark_printed(self, table: str, now: datetime | None = None) -> Ticket | None:
        table = require_table(table)
        with self.lock_service.table_lock(table):
            now = now or self.clock.now()
            ticket = self.latest_ticket(table, now)
            if ticket is None:
                logger.debug(f"Print on table {table}: no ticket today")
                return None

            # a reprint once preparation started must not restart the timers
            if derive_status(ticket, now, self.windows) != TableStatus.ORDERED:
                logger.info(f"Ticket {ticket.id} reprinted, printed_at kept")
                return ticket

            ticket.printed_at = now
            logger.info(f"Ticket {ticket.id} printed at {now.isoformat()}")
            return ticket

    def mark_paid(self, table: str, now: datetime | None = None) -> Ticket | None:
        table = require_table(table)
        with self.lock_service.table_lock(table):
            now = now or self.clock.now()
            ticket = self.latest_ticket(table, now)
            if ticket is None:
                logger.debug(f"Confirm on table {table}: no ticket today")
                return None
            if ticket.paid_at is not None:
                logger.debug(f"Ticket {ticket.id} already paid at {ticket.paid_at.isoformat()}")
                return ticket

            ticket.paid_at = now
            logger.info(f"Ticket {ticket.id} paid at {now.isoformat()}")
            return ticket

    def cancel_payment(self, table: str, now: datetime | None = None) -> Ticket | None:
        table = require_table(table)
        with self.lock_service.table_lock(table):
            now = now or self.clock.now()
            ticket = self.latest_ticket(table, now)
            if ticket is None or ticket.paid_at is None:
                logger.debug(f"Cancel payment on table {table}: nothing to cancel")
                return ticket

            ticket.paid_at = None
            logger.info(f"Payment of ticket {ticket.id} cancelled")
            return ticket

    # helpers
    def _resolve_item(self, raw: Dict[str, Any]) -> TicketItem:
        item_id = str(raw.get("id") or raw.get("item_id") or "").strip()
        if not item_id:
            raise InvalidInput("missing item id")

        quantity = raw.get("quantity")
        if quantity is None:
            quantity = raw.get("qty", 1)
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise InvalidInput(f"invalid quantity for item {item_id}")
        if quantity <= 0:
            raise InvalidInput(f"quantity must be positive for item {item_id}")

        menu_item = self.menu.lookup(item_id)
        if menu_item is not None:
            name = menu_item.name
            price = menu_item.price
        else:
            name = raw.get("name") or FALLBACK_ITEM_NAME
            price = to_price(raw.get("price"), item_id)

        return TicketItem(
            item_id=item_id,
            name=name,
            quantity=quantity,
            unit_price=price,
            owner_name=raw.get("owner_name"),
            modifiers=frozenset(raw.get("modifiers") or ()),
        )

    def _apply_retention(self, business_day: str) -> None:
        cutoff = date.fromisoformat(business_day) - timedelta(days=self.retention_days)
        purged = self.repo.purge_before(cutoff.isoformat())
        if purged:
            logger.info(f"Purged {purged} tickets older than {cutoff.isoformat()}")


def to_price(value: Any, item_id: str) -> Decimal:
    if value is None:
        return Decimal("0.00")
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise InvalidInput(f"invalid price for item {item_id}")
    if price < 0:
        raise InvalidInput(f"price must not be negative for item {item_id}")
    return price
