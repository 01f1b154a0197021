# qrorder/api/routers/carts.py
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from qrorder.domain.schemas import (
    CartAdjustIn,
    CartItemIn,
    CartOut,
    CheckoutIn,
    CreateOrderOut,
    OkOut,
)
from qrorder.services.cart_service import CartService
from qrorder.services.order_service import ticket_to_dict

router = APIRouter(prefix="/carts", tags=["carts"])


def get_service(request: Request) -> CartService:
    return request.app.state.floor.cart_service


@router.get("/{table}", response_model=CartOut)
def get_cart(
    table: str,
    guest_key: str | None = Query(None),
    svc: CartService = Depends(get_service),
):
    try:
        return svc.snapshot(table, guest_key)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{table}/items", response_model=CartOut)
def add_item(table: str, payload: CartItemIn, svc: CartService = Depends(get_service)):
    try:
        return svc.add_item(
            table=table,
            guest_key=payload.guest_key,
            guest_name=payload.guest_name,
            item={"id": payload.item_id, "name": payload.name, "price": payload.price},
            quantity=payload.quantity,
            modifiers=payload.modifiers,
            unit_price=payload.unit_price,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/{table}/items/adjust", response_model=CartOut)
def adjust_quantity(table: str, payload: CartAdjustIn, svc: CartService = Depends(get_service)):
    try:
        return svc.adjust_quantity(table, payload.guest_key, payload.key, payload.delta)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{table}", response_model=OkOut)
def clear_cart(table: str, svc: CartService = Depends(get_service)):
    try:
        svc.clear_table(table)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True}


@router.post("/{table}/checkout", response_model=CreateOrderOut)
def checkout(
    table: str,
    payload: CheckoutIn | None = None,
    svc: CartService = Depends(get_service),
):
    try:
        ticket = svc.checkout(table, payload.guest_key if payload else None)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "ticket": ticket_to_dict(ticket)}
