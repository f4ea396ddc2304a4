"""
Top-level package for the Rental Listings API.

All functionality lives in submodules under ``app``; import the ASGI
application from ``rental_listings_api.app.main``.
"""

__all__ = []
