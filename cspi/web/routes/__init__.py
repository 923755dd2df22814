"""
Web API routers.
"""

from cspi.web.metrics import router as metrics_router
from cspi.web.routes.health_routes import router as health_router
from cspi.web.routes.market_routes import router as market_router

__all__ = ["market_router", "health_router", "metrics_router"]
