# qrorder/services/status_engine.py
"""
Status of a table derived from its latest ticket.

Nothing here is stored: the status is recomputed from the ticket's
timestamps and the current time on every call.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta

from qrorder.data.models.ticket import Ticket
from qrorder.domain.status import TableStatus
from qrorder.utils.settings import (
    AUTO_PRINT_BUFFER_SECONDS,
    NEW_ORDER_WINDOW_SECONDS,
    PAY_CLEAR_SECONDS,
    PREPARATION_WINDOW_SECONDS,
)


@dataclass(frozen=True)
class StatusWindows:
    auto_print_buffer: timedelta = timedelta(seconds=AUTO_PRINT_BUFFER_SECONDS)
    preparation_window: timedelta = timedelta(seconds=PREPARATION_WINDOW_SECONDS)
    pay_clear_window: timedelta = timedelta(seconds=PAY_CLEAR_SECONDS)
    new_order_window: timedelta = timedelta(seconds=NEW_ORDER_WINDOW_SECONDS)


DEFAULT_WINDOWS = StatusWindows()


def effective_print_instant(
    ticket: Ticket,
    now: datetime,
    windows: StatusWindows = DEFAULT_WINDOWS,
) -> datetime | None:
    """When the kitchen got the ticket: a manual print, or the end of the auto-print buffer."""
    if ticket.printed_at is not None:
        return ticket.printed_at
    if now - ticket.created_at >= windows.auto_print_buffer:
        return ticket.created_at + windows.auto_print_buffer
    return None


def payment_display_expired(
    ticket: Ticket,
    now: datetime,
    windows: StatusWindows = DEFAULT_WINDOWS,
) -> bool:
    return ticket.paid_at is not None and now - ticket.paid_at >= windows.pay_clear_window


def derive_status(
    ticket: Ticket | None,
    now: datetime,
    windows: StatusWindows = DEFAULT_WINDOWS,
) -> TableStatus:
    """
    - no ticket -> EMPTY
    - paid -> PAID for pay_clear_window, then EMPTY
    - not printed (manually or by the buffer) -> ORDERED
    - printed -> IN_PREPARATION for preparation_window, then PAYMENT_DUE
    """
    if ticket is None:
        return TableStatus.EMPTY

    if ticket.paid_at is not None:
        if now - ticket.paid_at < windows.pay_clear_window:
            return TableStatus.PAID
        return TableStatus.EMPTY

    printed = effective_print_instant(ticket, now, windows)
    if printed is None:
        return TableStatus.ORDERED

    if now - printed < windows.preparation_window:
        return TableStatus.IN_PREPARATION
    return TableStatus.PAYMENT_DUE
