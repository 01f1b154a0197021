# qrorder/services/cart_service.py
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable

from qrorder.data.models.cart import CartLine
from qrorder.data.models.ticket import Ticket, TicketItem
from qrorder.domain.errors import InvalidInput
from qrorder.repos.cart_repo import CartRepo
from qrorder.services.lock_service import LockService
from qrorder.services.menu_catalog import MenuCatalog
from qrorder.services.order_service import FALLBACK_ITEM_NAME, OrderService, require_table, to_price
from qrorder.services.pricing import compute_totals
from qrorder.utils.logging import get_logger

logger = get_logger(__name__)

ANONYMOUS_GUEST = "anonymous"


def _escape(part: str) -> str:
    return part.replace("\\", "\\\\").replace("|", "\\|").replace(",", "\\,")


def item_identity(item_id: str, modifiers: Iterable[str] = ()) -> str:
    """Cart merge key: the item id plus its sorted, de-duplicated modifier names.

    Separators inside the id or a modifier name are backslash-escaped, so
    {"a,b"} and {"a", "b"} never share a key.
    """
    mods = sorted(set(modifiers))
    if not mods:
        return _escape(item_id)
    return f"{_escape(item_id)}|{','.join(_escape(m) for m in mods)}"


class CartService:
    """
    Shared cart of a table: every guest device keeps its own lines,
    the snapshot merges them into one basket.

    commands (add, adjust, clear, checkout) change state under the table lock
    query (snapshot) only reads
    """

    def __init__(
        self,
        cart_repo: CartRepo,
        menu: MenuCatalog,
        lock_service: LockService,
        order_service: OrderService,
    ):
        self.repo = cart_repo
        self.menu = menu
        self.lock_service = lock_service
        self.order_service = order_service

    # query
    def snapshot(self, table: str, requesting_guest_key: str | None = None) -> Dict[str, Any]:
        table = require_table(table)
        with self.lock_service.table_lock(table):
            items = []
            for guest_key, guest in self.repo.get_table_cart(table).items():
                for identity, line in guest.lines.items():
                    items.append(
                        {
                            "key": identity,
                            "item_id": line.item_id,
                            "name": line.name,
                            "quantity": line.quantity,
                            "unit_price": line.unit_price,
                            "line_total": line.line_total,
                            "modifiers": sorted(line.modifiers),
                            "guest_key": guest_key,
                            "owner_name": guest.display_name,
                            "is_owner": guest_key == requesting_guest_key,
                        }
                    )

        return {
            "table": table,
            "items": items,
            "totals": compute_totals(i["line_total"] for i in items),
        }

    # commands
    def add_item(
        self,
        table: str,
        guest_key: str | None,
        guest_name: str | None,
        item: Dict[str, Any],
        quantity: int,
        modifiers: Iterable[str] = (),
        unit_price: Decimal | None = None,
    ) -> Dict[str, Any]:
        table = require_table(table)
        item_id = str((item or {}).get("id") or "").strip()
        if not item_id:
            raise InvalidInput("missing item id")
        if quantity is None or quantity <= 0:
            raise InvalidInput("quantity must be greater than 0")

        guest_key = guest_key or ANONYMOUS_GUEST
        mods = frozenset(modifiers or ())
        identity = item_identity(item_id, mods)
        name, price = self._resolve(item, item_id, unit_price)

        with self.lock_service.table_lock(table):
            guest = self.repo.get_or_create_guest_cart(table, guest_key)
            if guest_name:
                guest.display_name = guest_name

            existing = guest.lines.get(identity)
            if existing:
                logger.info(
                    f"Item {identity} already in cart of {guest_key} at {table}, "
                    f"quantity {existing.quantity} -> {existing.quantity + quantity}"
                )
                existing.quantity += quantity
                existing.unit_price = price
                existing.modifiers = mods
            else:
                logger.info(f"Adding {quantity} x {identity} to cart of {guest_key} at {table}")
                guest.lines[identity] = CartLine(
                    item_id=item_id,
                    name=name,
                    quantity=quantity,
                    unit_price=price,
                    modifiers=mods,
                )

            return self.snapshot(table, guest_key)

    def adjust_quantity(
        self,
        table: str,
        guest_key: str | None,
        identity: str,
        delta: int,
    ) -> Dict[str, Any]:
        table = require_table(table)
        guest_key = guest_key or ANONYMOUS_GUEST

        with self.lock_service.table_lock(table):
            guest = self.repo.get_guest_cart(table, guest_key)
            line = guest.lines.get(identity) if guest else None
            if line is None:
                logger.debug(f"Adjust {identity} for {guest_key} at {table}: no such line")
                return self.snapshot(table, guest_key)

            new_quantity = line.quantity + delta
            if new_quantity <= 0:
                del guest.lines[identity]
                logger.info(f"Removed {identity} from cart of {guest_key} at {table}")
                if not guest.lines:
                    self.repo.delete_guest_cart(table, guest_key)
            else:
                line.quantity = new_quantity
                logger.info(f"Quantity of {identity} for {guest_key} at {table} set to {new_quantity}")

            return self.snapshot(table, guest_key)

    def clear_table(self, table: str) -> bool:
        table = require_table(table)
        with self.lock_service.table_lock(table):
            cleared = self.repo.delete_table_cart(table)
        if cleared:
            logger.info(f"Cart of table {table} cleared")
        return cleared

    def checkout(
        self,
        table: str,
        guest_key: str | None = None,
        now: datetime | None = None,
    ) -> Ticket:
        """Turn the whole table cart into one ticket, then drop the cart."""
        table = require_table(table)
        with self.lock_service.table_lock(table):
            guests = self.repo.get_table_cart(table)
            items = [
                TicketItem(
                    item_id=line.item_id,
                    name=line.name,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    owner_name=guest.display_name,
                    modifiers=line.modifiers,
                )
                for guest in guests.values()
                for line in guest.lines.values()
            ]
            if not items:
                raise InvalidInput("cart is empty")

            owner = guests.get(guest_key).display_name if guest_key in guests else None
            ticket = self.order_service.place_ticket(table, items, owner_name=owner, now=now)
            self.repo.delete_table_cart(table)

        logger.info(f"Cart of table {table} checked out as {ticket.id}")
        return ticket

    def _resolve(
        self,
        item: Dict[str, Any],
        item_id: str,
        unit_price: Decimal | None,
    ) -> tuple[str, Decimal]:
        menu_item = self.menu.lookup(item_id)
        name = menu_item.name if menu_item else (item.get("name") or FALLBACK_ITEM_NAME)
        if unit_price is not None:
            return name, to_price(unit_price, item_id)
        if menu_item is not None:
            return name, menu_item.price
        return name, to_price(item.get("price"), item_id)
