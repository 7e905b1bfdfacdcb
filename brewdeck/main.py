"""
brewdeck - Main FastAPI Application

HTTP front end for managing Homebrew formulae and casks: the installed
inventory, package actions with streamed progress, and catalog search.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from brewdeck import __version__
from brewdeck.config import get_settings
from brewdeck.dependencies import get_inventory_repository, get_locator, reset_dependencies
from brewdeck.exceptions import BrewDeckException, brewdeck_exception_handler
from brewdeck.api.routes import catalog_router, packages_router, stream_router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())
    logger.info("Starting brewdeck")
    logger.info(f"Inventory store: {settings.inventory_path}")

    # Failing to open the store is fatal: let it abort startup
    get_inventory_repository()

    brew_path = get_locator().locate()
    if brew_path is None:
        logger.warning("Homebrew not found; package actions will fail until it is installed")
    else:
        logger.info(f"Homebrew found at {brew_path}")

    yield

    logger.info("Shutting down brewdeck")
    reset_dependencies()


# Create FastAPI application
app = FastAPI(
    title="brewdeck",
    description="""
## Overview

Manage Homebrew packages over HTTP.

- **Inventory**: the locally recorded list of installed formulae and casks,
  rebuilt from `brew list --versions` after every change
- **Actions**: install, uninstall and upgrade, with install progress streamed
  as Server-Sent Events
- **Catalog**: search the formulae.brew.sh catalogs, once or as you type
  over a WebSocket
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(BrewDeckException, brewdeck_exception_handler)

# Include routers
app.include_router(packages_router, prefix="/api")
app.include_router(catalog_router, prefix="/api")
app.include_router(stream_router, prefix="/api")


@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": "brewdeck",
        "version": __version__,
        "description": "Homebrew package management API",
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/health", tags=["health"])
async def health():
    """Health check endpoint."""
    settings = get_settings()
    brew_path = get_locator().locate()
    return {
        "status": "healthy",
        "brew_found": brew_path is not None,
        "brew_path": str(brew_path) if brew_path else None,
        "inventory_dir": str(settings.inventory_path),
    }


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "brewdeck.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
