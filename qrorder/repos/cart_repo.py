# qrorder/repos/cart_repo.py
from qrorder.data.models.cart import GuestCart


class CartRepo:
    """table -> guest key -> GuestCart. Callers hold the table lock."""

    def __init__(self):
        self._carts: dict[str, dict[str, GuestCart]] = {}

    def get_table_cart(self, table: str) -> dict[str, GuestCart]:
        return self._carts.get(table, {})

    def get_guest_cart(self, table: str, guest_key: str) -> GuestCart | None:
        return self._carts.get(table, {}).get(guest_key)

    def get_or_create_guest_cart(self, table: str, guest_key: str) -> GuestCart:
        guests = self._carts.setdefault(table, {})
        return guests.setdefault(guest_key, GuestCart())

    def delete_guest_cart(self, table: str, guest_key: str) -> None:
        guests = self._carts.get(table)
        if guests is None:
            return
        guests.pop(guest_key, None)
        if not guests:
            del self._carts[table]

    def delete_table_cart(self, table: str) -> bool:
        return self._carts.pop(table, None) is not None
