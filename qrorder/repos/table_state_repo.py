# qrorder/repos/table_state_repo.py
from qrorder.data.models.table_state import TableState


class TableStateRepo:
    """Per-table flags. Every table has an implicit default state.

    Callers hold the table lock from LockService around get/update.
    """

    def __init__(self):
        self._states: dict[str, TableState] = {}

    def get(self, table: str) -> TableState:
        state = self._states.get(table)
        return state if state is not None else TableState()

    def save(self, table: str, state: TableState) -> TableState:
        self._states[table] = state
        return state
