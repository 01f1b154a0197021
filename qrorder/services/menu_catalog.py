# qrorder/services/menu_catalog.py
from typing import Iterable

from qrorder.data.menu import MENU
from qrorder.data.models.menu_item import MenuItem
from qrorder.utils.logging import get_logger

logger = get_logger(__name__)


class MenuCatalog:
    def __init__(self, items: Iterable[MenuItem] | None = None):
        self._items = list(MENU if items is None else items)
        self._by_id = {item.id: item for item in self._items}

    def lookup(self, item_id: str | None) -> MenuItem | None:
        if not item_id:
            return None
        item = self._by_id.get(item_id)
        if item is None:
            logger.debug(f"Menu item {item_id} not in catalog, using caller values")
        return item

    def items(self) -> list[MenuItem]:
        return list(self._items)
