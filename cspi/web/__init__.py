"""
HTTP surface for the CSPI engine (FastAPI).
"""

from cspi.web.app import create_app
from cspi.web.models import APIResponse, ErrorResponse
from cspi.web.routes import health_router, market_router, metrics_router

__all__ = ["create_app", "market_router", "health_router", "metrics_router", "APIResponse", "ErrorResponse"]
