# qrorder/services/table_service.py
import re
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Any, Dict, List

from qrorder.data.models.table_state import TableState
from qrorder.data.models.ticket import Ticket
from qrorder.domain.status import TableStatus
from qrorder.repos.table_state_repo import TableStateRepo
from qrorder.repos.ticket_repo import TicketRepo
from qrorder.services.business_day import business_day_key
from qrorder.services.lock_service import LockService
from qrorder.services.order_service import require_table
from qrorder.services.status_engine import (
    DEFAULT_WINDOWS,
    StatusWindows,
    derive_status,
    payment_display_expired,
)
from qrorder.utils.clock import Clock
from qrorder.utils.logging import get_logger
from qrorder.utils.settings import BUSINESS_DAY_ROLLOVER_HOUR, TABLE_COUNT

logger = get_logger(__name__)

# repeat order landing on a table the kitchen is already working on
_IN_FLIGHT = (TableStatus.IN_PREPARATION, TableStatus.PAYMENT_DUE)

_DIGITS = re.compile(r"\D")


def default_table_ids(count: int = TABLE_COUNT) -> List[str]:
    return [f"T{i + 1}" for i in range(count)]


@dataclass(frozen=True)
class TableView:
    id: str
    status: TableStatus
    pending: int
    last_ticket_at: datetime | None
    last_ticket: Dict[str, Any] | None
    cleared: bool
    closed_manually: bool
    session_start_at: datetime | None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "status": self.status,
            "pending": self.pending,
            "last_ticket_at": self.last_ticket_at,
            "last_ticket": self.last_ticket,
            "cleared": self.cleared,
            "closed_manually": self.closed_manually,
            "session_start_at": self.session_start_at,
        }


def table_sort_key(view: TableView):
    """Tables with a visible ticket first (newest first), then the rest by number."""
    if view.last_ticket_at is not None:
        return (0, -view.last_ticket_at.timestamp(), 0, "")
    digits = _DIGITS.sub("", view.id)
    if digits:
        return (1, 0.0, int(digits), view.id)
    return (2, 0.0, 0, view.id)


class TableService:
    """
    Table projection for the staff screen, plus the staff actions that only
    touch the table state (close, reopen, start session).

    Reads never mutate. The one write a read used to trigger, closing a
    session once its payment display expires, is the explicit reconcile().
    """

    def __init__(
        self,
        ticket_repo: TicketRepo,
        table_state_repo: TableStateRepo,
        lock_service: LockService,
        clock: Clock,
        table_ids: List[str] | None = None,
        windows: StatusWindows = DEFAULT_WINDOWS,
        rollover_hour: int = BUSINESS_DAY_ROLLOVER_HOUR,
    ):
        self.tickets = ticket_repo
        self.states = table_state_repo
        self.lock_service = lock_service
        self.clock = clock
        self.table_ids = list(table_ids) if table_ids is not None else default_table_ids()
        self.windows = windows
        self.rollover_hour = rollover_hour

    def _business_day(self, now: datetime) -> str:
        return business_day_key(now, self.rollover_hour, self.clock.tz)

    def _visible_ticket(self, latest: Ticket | None, state: TableState) -> Ticket | None:
        # a new session hides the previous party's last ticket
        if latest is None:
            return None
        if state.session_active and latest.created_at < state.session_start_at:
            return None
        return latest

    # reconcile
    def reconcile(self, table: str, now: datetime | None = None) -> bool:
        """
        Close the session of a table whose payment display has expired.

        Returns True only on the call that actually closed it.
        """
        with self.lock_service.table_lock(table):
            now = now or self.clock.now()
            state = self.states.get(table)
            if not state.session_active:
                return False

            latest = self.tickets.latest_for_table(table, self._business_day(now))
            visible = self._visible_ticket(latest, state)
            if visible is None or not payment_display_expired(visible, now, self.windows):
                return False

            self.states.save(table, replace(state, session_start_at=None))
            logger.info(f"Session on table {table} closed after payment of {visible.id}")
            return True

    # query
    def project_table(self, table: str, now: datetime | None = None) -> TableView:
        with self.lock_service.table_lock(table):
            now = now or self.clock.now()
            state = self.states.get(table)
            today = self.tickets.for_table(table, self._business_day(now))
            latest = today[-1] if today else None
            visible = self._visible_ticket(latest, state)

            base = derive_status(visible, now, self.windows)
            auto_cleared = bool(
                base == TableStatus.EMPTY and visible is not None and visible.paid_at is not None
            )
            cleared = state.closed_manually or auto_cleared

            status = base
            if state.closed_manually:
                status = TableStatus.EMPTY
            elif visible is None and state.session_active:
                status = TableStatus.IN_PROGRESS
            elif self._is_new_order(today, visible, state, status, now):
                status = TableStatus.NEW_ORDER

            last_ticket_at = None
            last_ticket = None
            if visible is not None and not cleared:
                last_ticket_at = visible.created_at
                last_ticket = {
                    "id": visible.id,
                    "total": visible.total,
                    "at": visible.created_at,
                    "item_count": sum(i.quantity for i in visible.items),
                }

            return TableView(
                id=table,
                status=status,
                pending=0 if status == TableStatus.EMPTY else 1,
                last_ticket_at=last_ticket_at,
                last_ticket=last_ticket,
                cleared=cleared,
                closed_manually=state.closed_manually,
                session_start_at=state.session_start_at,
            )

    def list_tables(self, now: datetime | None = None) -> List[TableView]:
        now = now or self.clock.now()
        views = []
        for table in self.table_ids:
            with self.lock_service.table_lock(table):
                self.reconcile(table, now)
                views.append(self.project_table(table, now))
        return sorted(views, key=table_sort_key)

    def _is_new_order(
        self,
        today: List[Ticket],
        visible: Ticket | None,
        state: TableState,
        status: TableStatus,
        now: datetime,
    ) -> bool:
        if visible is None or len(today) < 2:
            return False
        if status in (TableStatus.EMPTY, TableStatus.PAID):
            return False
        if now - visible.created_at > self.windows.new_order_window:
            return False
        # visible is always the latest ticket of the day
        previous = today[-2]
        if self._visible_ticket(previous, state) is None:
            return False
        return derive_status(previous, now, self.windows) in _IN_FLIGHT

    # commands
    def close_table(self, table: str) -> TableState:
        return self._update_state(table, "closed manually", closed_manually=True)

    def reopen_table(self, table: str) -> TableState:
        return self._update_state(table, "reopened", closed_manually=False)

    def start_session(self, table: str, now: datetime | None = None) -> TableState:
        now = now or self.clock.now()
        return self._update_state(
            table,
            f"session started at {now.isoformat()}",
            closed_manually=False,
            session_start_at=now,
        )

    def _update_state(self, table: str, what: str, **changes) -> TableState:
        table = require_table(table)
        with self.lock_service.table_lock(table):
            state = self.states.save(table, replace(self.states.get(table), **changes))
        logger.info(f"Table {table} {what}")
        return state
