# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the FileDrop API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main
# =============================================================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.exceptions import (
    FileDropException,
    filedrop_exception_handler,
    validation_exception_handler,
)
from app.routers import downloads, files, health
from app.auth import routes as auth_routes

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup: create the storage root, staging folder and credentials folder.
    """
    logger.info(f"Starting FileDrop API in {settings.ENVIRONMENT} mode")

    settings.storage_root.mkdir(parents=True, exist_ok=True)
    settings.staging_dir.mkdir(parents=True, exist_ok=True)
    settings.creds_path.parent.mkdir(parents=True, exist_ok=True)

    logger.info(f"Storage root: {settings.storage_root}")
    logger.info(f"Max upload size: {settings.MAX_UPLOAD_SIZE_MB}MB")
    if settings.AUTH_SECRET == "change-me-secret":
        logger.warning("AUTH_SECRET is the default value; set it before exposing the server")

    yield

    logger.info("Shutting down FileDrop API")


# Create FastAPI application
app = FastAPI(
    title="FileDrop API",
    description="""
## Self-hosted File Drop

Upload files and folders, browse them as a tree, move and delete them,
and download whole folders as zip archives.

### Quick Start

```bash
# 1. Create the admin account (first run only)
curl -X POST http://localhost:3000/api/auth/setup \\
  -H "Content-Type: application/json" \\
  -d '{"username": "admin", "password": "secret"}'

# 2. Upload a file into a folder
curl -X POST http://localhost:3000/api/upload \\
  -H "Authorization: Bearer $TOKEN" \\
  -F "files=@report.pdf" -F 'paths=["docs/report.pdf"]'

# 3. Download the folder as a zip
curl -OJ -H "Authorization: Bearer $TOKEN" \\
  "http://localhost:3000/api/zip?path=docs"
```
""",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {
            "name": "Auth",
            "description": "Admin setup and login",
        },
        {
            "name": "Files",
            "description": "List, upload, move, delete and zip stored files",
        },
        {
            "name": "Downloads",
            "description": "Authenticated single-file downloads",
        },
        {
            "name": "Health",
            "description": "API health checks",
        },
    ],
)


# =============================================================================
# Middleware
# =============================================================================

# CORS middleware - allows cross-origin requests
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list if settings.is_production else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Exception Handlers
# =============================================================================

@app.exception_handler(FileDropException)
async def handle_filedrop_exception(request: Request, exc: FileDropException):
    """Handle custom FileDrop exceptions."""
    if exc.status_code >= 500:
        logger.error(f"{exc.code}: {exc.message} {exc.details}")
    return await filedrop_exception_handler(request, exc)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError):
    """Handle malformed request bodies and parameters."""
    return await validation_exception_handler(request, exc)


@app.exception_handler(Exception)
async def handle_general_exception(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "detail": "An unexpected error occurred",
            "code": "INTERNAL_ERROR",
        }
    )


# =============================================================================
# Routers
# =============================================================================

# Health check endpoints
app.include_router(
    health.router,
    tags=["Health"]
)

# Setup and login
app.include_router(
    auth_routes.router,
    prefix="/api",
    tags=["Auth"]
)

# File management endpoints
app.include_router(
    files.router,
    prefix="/api",
    tags=["Files"]
)

# Single-file downloads
app.include_router(
    downloads.router,
    tags=["Downloads"]
)


# =============================================================================
# Static Front End
# =============================================================================
# Mounted last so that it only catches paths no router claimed.

if settings.public_dir.is_dir():
    app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="public")
else:
    logger.info(f"No front end at {settings.public_dir}, serving the API only")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)
