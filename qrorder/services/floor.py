# qrorder/services/floor.py
from typing import List

from qrorder.repos.cart_repo import CartRepo
from qrorder.repos.table_state_repo import TableStateRepo
from qrorder.repos.ticket_repo import TicketRepo
from qrorder.services.cart_service import CartService
from qrorder.services.lock_service import LockService
from qrorder.services.menu_catalog import MenuCatalog
from qrorder.services.order_service import OrderService
from qrorder.services.status_engine import DEFAULT_WINDOWS, StatusWindows
from qrorder.services.table_service import TableService
from qrorder.utils.clock import Clock
from qrorder.utils.settings import BUSINESS_DAY_ROLLOVER_HOUR, TICKET_RETENTION_DAYS


class Floor:
    """
    Owner of all in-memory state of one restaurant: tickets, table states,
    carts and the per-table locks, plus the services working on them.
    One instance per app, injected through app.state.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        menu: MenuCatalog | None = None,
        table_ids: List[str] | None = None,
        windows: StatusWindows = DEFAULT_WINDOWS,
        rollover_hour: int = BUSINESS_DAY_ROLLOVER_HOUR,
        retention_days: int = TICKET_RETENTION_DAYS,
    ):
        self.clock = clock or Clock()
        self.menu = menu or MenuCatalog()
        self.locks = LockService()

        self.tickets = TicketRepo()
        self.table_states = TableStateRepo()
        self.carts = CartRepo()

        self.order_service = OrderService(
            ticket_repo=self.tickets,
            table_state_repo=self.table_states,
            menu=self.menu,
            lock_service=self.locks,
            clock=self.clock,
            windows=windows,
            rollover_hour=rollover_hour,
            retention_days=retention_days,
        )
        self.table_service = TableService(
            ticket_repo=self.tickets,
            table_state_repo=self.table_states,
            lock_service=self.locks,
            clock=self.clock,
            table_ids=table_ids,
            windows=windows,
            rollover_hour=rollover_hour,
        )
        self.cart_service = CartService(
            cart_repo=self.carts,
            menu=self.menu,
            lock_service=self.locks,
            order_service=self.order_service,
        )
