from fastapi import APIRouter

from .dashboard import router as dashboard_router
from .invoices import router as invoices_router
from .quotes import router as quotes_router

api_router = APIRouter()
api_router.include_router(invoices_router, tags=["invoices"])
api_router.include_router(quotes_router, tags=["quotes"])
api_router.include_router(dashboard_router, tags=["dashboard"])
