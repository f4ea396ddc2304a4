"""
Endpoint modules.

Each module defines an APIRouter for one area (properties, info).  The
routers are aggregated in ``api/router.py``.
"""
