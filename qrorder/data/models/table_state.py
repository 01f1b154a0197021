# qrorder/data/models/table_state.py
from dataclasses import dataclass
from datetime import datetime


@dataclass
class TableState:
    closed_manually: bool = False
    session_start_at: datetime | None = None

    @property
    def session_active(self) -> bool:
        return self.session_start_at is not None
