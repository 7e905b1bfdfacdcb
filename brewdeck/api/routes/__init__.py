"""
API routes package.
"""

from brewdeck.api.routes.packages import router as packages_router
from brewdeck.api.routes.catalog import router as catalog_router
from brewdeck.api.routes.stream import router as stream_router

__all__ = ["packages_router", "catalog_router", "stream_router"]
