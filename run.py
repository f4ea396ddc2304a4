"""Entry point for the Rental Listings API.

Starts the FastAPI application with Uvicorn.  Intended to be executed
from the project root, for example in Docker, where only a single
Python file is specified.

Configuration (Firebase credentials, storage bucket, store backend,
host and port) is read from environment variables; see
``rental_listings_api/app/core/config.py``.

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from rental_listings_api.app.core.config import settings
from rental_listings_api.app.main import app


async def run_api() -> None:
    """Serve the API until interrupted."""
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    await server.serve()


async def main() -> None:
    try:
        await run_api()
    except Exception:
        logging.exception("Exception in service")
        raise


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
