# qrorder/main.py
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from qrorder.api.routers import carts, health, menu, orders, staff
from qrorder.services.floor import Floor
from qrorder.utils.logging import get_logger
from qrorder.utils.settings import HOST, PORT

logger = get_logger(__name__)


def create_app(floor: Floor | None = None) -> FastAPI:
    app = FastAPI(
        title="QR Ordering Service",
        version="1.0.0",
    )
    app.state.floor = floor or Floor()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        logger.exception(f"{request.method} {request.url.path} failed")
        return JSONResponse({"ok": False, "error": "internal_error"}, status_code=500)

    # Include routers
    app.include_router(health.router)
    app.include_router(menu.router)
    app.include_router(orders.router)
    app.include_router(staff.router)
    app.include_router(staff.legacy_router)
    app.include_router(carts.router)

    logger.info(f"Serving tables {', '.join(app.state.floor.table_service.table_ids)}")
    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host=HOST, port=PORT)
