# routers/__init__.py

from fastapi import APIRouter

from .auth import router as auth_router
from .tenants import router as tenants_router
from .rent import router as rent_router
from .maintenance import router as maintenance_router
from .dashboard import router as dashboard_router
from .health import router as health_router


# Master router
api_router = APIRouter()

# Auth
api_router.include_router(auth_router)

# Core data
api_router.include_router(tenants_router)
api_router.include_router(rent_router)
api_router.include_router(maintenance_router)
api_router.include_router(dashboard_router)

# Health
api_router.include_router(health_router)

__all__ = ["api_router"]
