"""
Main FastAPI application for the SympCheck backend.
"""
import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sympcheck.api.api_v1 import api_router
from sympcheck.core.config import settings
from sympcheck.core.exceptions import AuthenticationError, ExtractionInvalidError, SympCheckError
from sympcheck.core.logging import setup_logging
from sympcheck.db.init_db import init_db
from sympcheck.schemas.common import failure

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    setup_logging(settings)
    logger.info("Starting SympCheck Backend...")

    try:
        logger.info("Initializing database...")
        init_db()
        logger.info("Application startup completed")
        yield
    except Exception as e:
        logger.error(f"Application startup failed: {e}")
        raise
    finally:
        logger.info("Shutting down SympCheck Backend...")


# Create FastAPI application
app = FastAPI(
    title="SympCheck Backend API",
    description="Symptom analysis backend with disease prediction, care guidance and history analytics",
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/api/v1/openapi.json",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} - "
        f"Status: {response.status_code} - "
        f"Time: {process_time:.3f}s"
    )

    response.headers["X-Process-Time"] = str(process_time)
    return response


app.include_router(api_router, prefix="/api/v1")


@app.exception_handler(SympCheckError)
async def sympcheck_exception_handler(request: Request, exc: SympCheckError):
    """Render application errors in the response envelope."""
    if isinstance(exc, ExtractionInvalidError):
        content = failure(
            message=exc.message,
            warnings=exc.warnings,
            error=exc.error,
            data={"original_input": exc.original_input},
        )
    else:
        content = failure(message=exc.message)

    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.message}")

    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Render request validation errors as 400 responses."""
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg", "Invalid value"),
        }
        for error in exc.errors()
    ]
    first = errors[0] if errors else {"field": "", "message": "Invalid request"}
    error_text = f"{first['field']}: {first['message']}" if first["field"] else first["message"]

    return JSONResponse(
        status_code=400,
        content=failure(message="Invalid request", error=error_text, data={"errors": errors}),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Render framework HTTP errors in the response envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=failure(message=str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content=failure(
            message="Internal server error",
            error=str(exc) if settings.DEBUG else "An unexpected error occurred",
        ),
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "SympCheck Backend API",
        "version": settings.APP_VERSION,
        "status": "operational",
        "docs": "/docs",
        "health": "/api/v1/health/"
    }


if __name__ == "__main__":
    uvicorn.run(
        "sympcheck.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
