from __future__ import annotations

from app.api.routes.authentication import router as authentication_router
from app.api.routes.health import router as health_router
from app.api.routes.products import router as products_router
from app.api.routes.users import router as users_router

__all__ = ["authentication_router", "health_router", "products_router", "users_router"]
