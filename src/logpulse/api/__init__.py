"""
API endpoints package.

Contains FastAPI routers for all service endpoints:
- /v1/config:validate, /v1/config/validation - Configuration validation
- /v1/pv:classify - Page-view classification
- /v1/admin/reload, /v1/admin/status - Admin operations
- /metrics - Prometheus metrics
- /healthz, /readyz - Health checks
"""
from .admin import router as admin_router
from .config import router as config_router
from .healthz import router as healthz_router
from .metrics import router as metrics_router
from .pv import router as pv_router

__all__ = ["admin_router", "config_router", "healthz_router", "metrics_router", "pv_router"]
