# qrorder/api/routers/orders.py
from fastapi import APIRouter, Depends, HTTPException, Request

from qrorder.domain.schemas import CreateOrderIn, CreateOrderOut
from qrorder.services.order_service import OrderService, ticket_to_dict

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(request: Request) -> OrderService:
    return request.app.state.floor.order_service


@router.post("", response_model=CreateOrderOut)
def create_order(payload: CreateOrderIn, svc: OrderService = Depends(get_service)):
    """
    Ticket from a manual item list (guest PWA without a shared cart, or staff).
    Opens the table session if none is active.
    """
    try:
        ticket = svc.create_ticket(
            table=payload.table,
            items=[item.model_dump() for item in payload.items],
            owner_name=payload.owner_name,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"ok": True, "ticket": ticket_to_dict(ticket)}
