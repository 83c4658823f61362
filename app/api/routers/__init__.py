"""
app/api/routers package marker.
"""

from app.api.routers import results_router, search_router

__all__ = [
    "results_router",
    "search_router",
]
