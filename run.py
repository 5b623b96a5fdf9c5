"""Entry point for the Ride Records API.

Starts the FastAPI application with Uvicorn.  Host, port, log level and
the storage backend are read from environment variables (see
``ride_records_api.app.core.config``).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from ride_records_api.app.core.config import settings
from ride_records_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        # Our setup_logging owns the handlers; requests are logged by AccessLogMiddleware.
        log_config=None,
        access_log=False,
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        logging.getLogger(__name__).info("Server stopped")
