"""FastAPI application setup."""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from routers import admin, health, ingestion, search
from src.config.settings import get_settings
from src.utils.errors import IngestionError
from src.utils.logging import configure_logging

configure_logging(get_settings().log_level)

app = FastAPI(
    title="Document Operations API",
    description="API for document upload, content extraction and search",
    version="1.0.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:4200",
        "http://localhost:3000",
        "http://127.0.0.1:4200",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(IngestionError)
async def ingestion_error_handler(request: Request, exc: IngestionError):
    """Render pipeline errors as ``{error, message}`` with the error's status code."""
    if exc.status_code >= 500:
        logger.error("{} {} failed: {}", request.method, request.url.path, exc.message)
    else:
        logger.warning("{} {} rejected ({}): {}", request.method, request.url.path, exc.error_code, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.opt(exception=exc).error("Unexpected error during {} {}", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": type(exc).__name__, "message": str(exc)})


# Include routers
app.include_router(ingestion.router, prefix="/api", tags=["Upload"])
app.include_router(search.router, prefix="/api", tags=["Search"])
app.include_router(admin.router, prefix="/api", tags=["Admin"])
app.include_router(health.router, tags=["Health"])
