# qrorder/repos/ticket_repo.py
import itertools
import threading

from qrorder.data.models.ticket import Ticket


class TicketRepo:
    """Append-only, in-memory ticket list."""

    def __init__(self):
        self._tickets: list[Ticket] = []
        self._seq = itertools.count(1)
        self._lock = threading.Lock()

    def next_id(self) -> str:
        with self._lock:
            return f"TCK{next(self._seq)}"

    def add(self, ticket: Ticket) -> Ticket:
        with self._lock:
            self._tickets.append(ticket)
        return ticket

    def get(self, ticket_id: str) -> Ticket | None:
        with self._lock:
            return next((t for t in self._tickets if t.id == ticket_id), None)

    def for_business_day(self, business_day: str) -> list[Ticket]:
        with self._lock:
            found = [t for t in self._tickets if t.business_day == business_day]
        return sorted(found, key=lambda t: t.created_at)

    def for_table(self, table: str, business_day: str) -> list[Ticket]:
        with self._lock:
            found = [
                t for t in self._tickets
                if t.table == table and t.business_day == business_day
            ]
        return sorted(found, key=lambda t: t.created_at)

    def latest_for_table(self, table: str, business_day: str) -> Ticket | None:
        tickets = self.for_table(table, business_day)
        return tickets[-1] if tickets else None

    def purge_before(self, business_day: str) -> int:
        # "YYYY-MM-DD" keys compare in date order
        with self._lock:
            kept = [t for t in self._tickets if t.business_day >= business_day]
            purged = len(self._tickets) - len(kept)
            self._tickets = kept
        return purged

    def count(self) -> int:
        with self._lock:
            return len(self._tickets)
