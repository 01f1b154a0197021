# qrorder/api/routers/staff.py
from fastapi import APIRouter, Depends, HTTPException, Request

from qrorder.domain.schemas import OkOut, SummaryOut, TableActionIn, TablesOut
from qrorder.services.floor import Floor


def get_floor(request: Request) -> Floor:
    return request.app.state.floor


def build_router(prefix: str = "") -> APIRouter:
    """Staff screen routes. Mounted at the root and under /staff for older clients."""
    router = APIRouter(prefix=prefix, tags=["staff"])

    def run(action, table: str):
        try:
            action(table)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return {"ok": True}

    @router.get("/tables", response_model=TablesOut)
    def list_tables(floor: Floor = Depends(get_floor)):
        views = floor.table_service.list_tables()
        return {"tables": [v.to_dict() for v in views]}

    @router.get("/summary", response_model=SummaryOut)
    def day_summary(floor: Floor = Depends(get_floor)):
        return {"tickets": floor.order_service.day_summary()}

    @router.post("/print", response_model=OkOut)
    def mark_printed(payload: TableActionIn, floor: Floor = Depends(get_floor)):
        return run(floor.order_service.mark_printed, payload.table)

    @router.post("/confirm", response_model=OkOut)
    def mark_paid(payload: TableActionIn, floor: Floor = Depends(get_floor)):
        return run(floor.order_service.mark_paid, payload.table)

    @router.post("/cancel-confirm", response_model=OkOut)
    def cancel_payment(payload: TableActionIn, floor: Floor = Depends(get_floor)):
        return run(floor.order_service.cancel_payment, payload.table)

    @router.post("/close-table", response_model=OkOut)
    def close_table(payload: TableActionIn, floor: Floor = Depends(get_floor)):
        return run(floor.table_service.close_table, payload.table)

    @router.post("/cancel-close", response_model=OkOut)
    def reopen_table(payload: TableActionIn, floor: Floor = Depends(get_floor)):
        return run(floor.table_service.reopen_table, payload.table)

    @router.post("/start-session", response_model=OkOut)
    def start_session(payload: TableActionIn, floor: Floor = Depends(get_floor)):
        return run(floor.table_service.start_session, payload.table)

    return router


router = build_router()
legacy_router = build_router("/staff")
