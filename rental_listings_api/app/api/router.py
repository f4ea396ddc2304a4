"""
Top-level API router.

Aggregates the domain routers under a unified prefix.  When new
endpoints are added, include their routers here.
"""

from fastapi import APIRouter

from .endpoints import info, properties

router = APIRouter()

router.include_router(properties.router, prefix="/properties", tags=["properties"])
router.include_router(info.router, tags=["info"])
