from qrorder.data.models.ticket import Ticket, TicketItem
from qrorder.data.models.table_state import TableState
from qrorder.data.models.cart import CartLine, GuestCart
from qrorder.data.models.menu_item import MenuItem

__all__ = ["Ticket", "TicketItem", "TableState", "CartLine", "GuestCart", "MenuItem"]
