# qrorder/domain/status.py
from enum import Enum


class TableStatus(str, Enum):
    # derived from a single ticket
    EMPTY = "empty"
    ORDERED = "ordered"
    IN_PREPARATION = "in_preparation"
    PAYMENT_DUE = "payment_due"
    PAID = "paid"
    # display-only overrides applied by the table projection
    IN_PROGRESS = "in_progress"
    NEW_ORDER = "new_order"
