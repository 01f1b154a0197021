# qrorder/domain/schemas.py
from datetime import datetime
from decimal import Decimal
from typing import Any, List

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from qrorder.domain.status import TableStatus

# clients send modifiers under several names, as strings or {"name": ...} objects
MODIFIER_ALIASES = AliasChoices("modifiers", "options", "supplements")


def normalize_modifiers(value: Any) -> set[str]:
    if value is None:
        return set()
    if isinstance(value, (str, dict)):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ValueError("modifiers must be a list")
    names = set()
    for entry in value:
        if isinstance(entry, dict):
            entry = entry.get("name") or entry.get("label")
        if entry is None:
            continue
        if not isinstance(entry, str):
            raise ValueError("modifiers must be strings or objects with a name")
        name = entry.strip()
        if name:
            names.add(name)
    return names


class _ModifiersIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    modifiers: set[str] = Field(default_factory=set, validation_alias=MODIFIER_ALIASES)

    @field_validator("modifiers", mode="before")
    @classmethod
    def _normalize(cls, v):
        return normalize_modifiers(v)


# requests

class OrderItemIn(_ModifiersIn):
    """Order line. Name and price are only used when the id is not on the menu."""

    id: str | None = Field(None, validation_alias=AliasChoices("id", "item_id"))
    name: str | None = None
    price: Decimal | None = None
    quantity: int = Field(1, validation_alias=AliasChoices("quantity", "qty"))
    owner_name: str | None = None


class CreateOrderIn(BaseModel):
    table: str = ""
    items: List[OrderItemIn] = Field(default_factory=list)
    owner_name: str | None = None


class TableActionIn(BaseModel):
    table: str = ""


class CartItemIn(_ModifiersIn):
    """Add-to-cart request from one guest device."""

    guest_key: str | None = None
    guest_name: str | None = None
    item_id: str | None = Field(None, validation_alias=AliasChoices("item_id", "id"))
    name: str | None = None
    price: Decimal | None = None
    unit_price: Decimal | None = None
    quantity: int = Field(1, validation_alias=AliasChoices("quantity", "qty"))


class CartAdjustIn(BaseModel):
    guest_key: str | None = None
    key: str = Field(..., min_length=1, description="item identity of the cart line")
    delta: int


class CheckoutIn(BaseModel):
    guest_key: str | None = None


# responses

class OkOut(BaseModel):
    ok: bool = True


class MenuItemOut(BaseModel):
    id: str
    name: str
    price: Decimal
    category: str

    model_config = ConfigDict(from_attributes=True)


class MenuOut(BaseModel):
    ok: bool = True
    items: List[MenuItemOut]


class TicketItemOut(BaseModel):
    item_id: str
    name: str
    quantity: int
    unit_price: Decimal
    owner_name: str | None = None
    modifiers: List[str] = []


class TicketOut(BaseModel):
    id: str
    table: str
    items: List[TicketItemOut]
    subtotal: Decimal
    surtax: Decimal
    total: Decimal
    owner_name: str | None = None
    created_at: datetime
    business_day: str
    printed_at: datetime | None = None
    paid_at: datetime | None = None


class CreateOrderOut(BaseModel):
    ok: bool = True
    ticket: TicketOut


class SummaryTicketOut(TicketOut):
    time: str
    status: TableStatus


class SummaryOut(BaseModel):
    tickets: List[SummaryTicketOut]


class LastTicketOut(BaseModel):
    id: str
    total: Decimal
    at: datetime
    item_count: int


class TableViewOut(BaseModel):
    id: str
    status: TableStatus
    pending: int
    last_ticket_at: datetime | None = None
    last_ticket: LastTicketOut | None = None
    cleared: bool
    closed_manually: bool
    session_start_at: datetime | None = None


class TablesOut(BaseModel):
    tables: List[TableViewOut]


class CartLineOut(BaseModel):
    key: str
    item_id: str
    name: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    modifiers: List[str]
    guest_key: str
    owner_name: str | None = None
    is_owner: bool


class CartTotalsOut(BaseModel):
    subtotal: Decimal
    surtax: Decimal
    total: Decimal


class CartOut(BaseModel):
    table: str
    items: List[CartLineOut]
    totals: CartTotalsOut
