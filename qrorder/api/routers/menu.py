# qrorder/api/routers/menu.py
from fastapi import APIRouter, Depends, Request

from qrorder.domain.schemas import MenuOut
from qrorder.services.menu_catalog import MenuCatalog

router = APIRouter(prefix="/menu", tags=["menu"])


def get_service(request: Request) -> MenuCatalog:
    return request.app.state.floor.menu


@router.get("", response_model=MenuOut)
def list_menu(svc: MenuCatalog = Depends(get_service)):
    return {"ok": True, "items": svc.items()}
