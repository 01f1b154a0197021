# qrorder/data/menu.py
from decimal import Decimal

from qrorder.data.models.menu_item import MenuItem

# dev menu, served as-is by GET /menu
MENU = [
    MenuItem(id="m1", name="Margherita", price=Decimal("8.50"), category="Pizzas"),
    MenuItem(id="m2", name="Regina", price=Decimal("10.00"), category="Pizzas"),
    MenuItem(id="m3", name="Cheeseburger", price=Decimal("12.00"), category="Burgers"),
    MenuItem(id="m4", name="Frites", price=Decimal("3.50"), category="Sides"),
    MenuItem(id="m5", name="Tiramisu", price=Decimal("5.00"), category="Desserts"),
    MenuItem(id="m6", name="Coca 33cl", price=Decimal("2.80"), category="Boissons"),
]
