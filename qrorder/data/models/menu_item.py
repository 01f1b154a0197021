# qrorder/data/models/menu_item.py
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class MenuItem:
    id: str
    name: str
    price: Decimal
    category: str
