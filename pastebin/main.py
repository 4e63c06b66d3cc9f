"""
Pastebin - Main FastAPI application.
"""
import logging
from fastapi import FastAPI

from pastebin import __version__
from pastebin.config import settings
from pastebin.routes import health, pastes
from pastebin.storage import get_storage

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Pastebin",
    description="Share short-lived text and code snippets",
    version=__version__,
)

# Include route modules
app.include_router(health.router)
app.include_router(pastes.router)


@app.on_event("startup")
async def startup_event():
    """Build the process-wide storage once, before the first request."""
    logger.info("Pastebin application starting...")
    storage = get_storage()
    logger.info(f"DATABASE: using {storage.current_mode()} storage")


@app.on_event("shutdown")
async def shutdown_event():
    """Shutdown event handler."""
    logger.info("Pastebin application shutting down...")
    await get_storage().close()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "pastebin.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
    )
