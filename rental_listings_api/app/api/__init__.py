"""
API package containing the HTTP routes.

``router.py`` exposes a top-level ``router`` aggregating the routers
defined in ``endpoints``; ``main.py`` mounts it under the configured
prefix.
"""
