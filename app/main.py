# app/main.py
"""
Main application file for DocNotes.

``create_app`` builds the FastAPI application with its database, blob store
and caller resolver attached to ``app.state``. The module-level ``app`` uses
the settings loaded from the environment:

    uvicorn app.main:app --reload
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
import json
import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from app.api.api import api_router
from app.api.deps import HeaderCallerResolver
from app.core.config import Settings, settings as default_settings
from app.core.exceptions import (
    DatabaseException,
    DocNotesException,
    EntityNotFoundException,
    PayloadTooLargeException,
    PermissionDeniedException,
    RangeNotSatisfiableException,
    StorageException,
    ValidationException,
)
from app.db.session import Database
from app.services.blob_store import LocalBlobStore

logger = logging.getLogger("app")

# Most specific first
EXCEPTION_STATUS_CODES = [
    (EntityNotFoundException, status.HTTP_404_NOT_FOUND),
    (PermissionDeniedException, status.HTTP_403_FORBIDDEN),
    (PayloadTooLargeException, 413),
    (RangeNotSatisfiableException, 416),
    (ValidationException, status.HTTP_400_BAD_REQUEST),
    (StorageException, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (DatabaseException, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def configure_logging(config: Settings) -> None:
    """Configure the root logger once for the process."""
    level = getattr(logging, config.LOG_LEVEL, logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    logger.setLevel(level)
    logger.info(f"Configured logger ('{logger.name}') effective level: {logging.getLevelName(logger.getEffectiveLevel())}")


def status_code_for(exc: DocNotesException) -> int:
    for exc_type, code in EXCEPTION_STATUS_CODES:
        if isinstance(exc, exc_type):
            return code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        if request.method != "OPTIONS":
            response.headers["X-Content-Type-Options"] = "nosniff"
            response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


def create_app(config: Optional[Settings] = None) -> FastAPI:
    """
    Build the DocNotes application.

    Args:
        config: Settings to use; the environment-loaded settings by default

    Returns:
        Configured FastAPI application
    """
    config = config or default_settings
    configure_logging(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.database.init()
        app.state.blob_store.initialize()
        logger.info(f"{config.PROJECT_NAME} started ({config.ENVIRONMENT})")
        yield
        app.state.database.dispose()
        logger.info(f"{config.PROJECT_NAME} stopped")

    app = FastAPI(
        title=config.PROJECT_NAME,
        description="API for collaborative PDF annotation",
        version="1.0.0",
        openapi_url=f"{config.API_PREFIX}/openapi.json",
        docs_url=f"{config.API_PREFIX}/docs",
        redoc_url=f"{config.API_PREFIX}/redoc",
        debug=config.DEBUG,
        lifespan=lifespan,
    )

    app.state.settings = config
    app.state.database = Database(config.DATABASE_URL, echo=config.DB_ECHO)
    app.state.blob_store = LocalBlobStore(config.BLOB_STORAGE_PATH)
    app.state.caller_resolver = HeaderCallerResolver(config)

    # Set up CORS
    origins = [str(origin).rstrip("/") for origin in config.BACKEND_CORS_ORIGINS if origin]
    if not origins:
        origins = ["*"]
        logger.warning("No CORS origins configured, allowing all origins")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "Content-Range", "Accept-Ranges"],
        max_age=86400,
    )
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    @app.exception_handler(DocNotesException)
    async def docnotes_exception_handler(request: Request, exc: DocNotesException):
        status_code = status_code_for(exc)
        body = exc.to_dict()
        headers = None

        if status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
            body["details"] = {}
        if isinstance(exc, RangeNotSatisfiableException):
            headers = {"Content-Range": f"bytes */{exc.total_size}"}

        return JSONResponse(status_code=status_code, content=body, headers=headers)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        error_details = jsonable_encoder(exc.errors())
        logger.warning(f"Request validation failed for {request.method} {request.url.path}")
        logger.debug(f"Validation Errors:\n{json.dumps(error_details, indent=2)}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Request validation failed",
                "code": "VALIDATION_001",
                "details": {"errors": error_details},
            },
        )

    # Log requests
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start_time = datetime.now()
        logger.info(f"-> Request: {request.method} {request.url.path}")
        try:
            response = await call_next(request)
            process_time = (datetime.now() - start_time).total_seconds()
            logger.info(f"<- Response: {response.status_code} ({process_time:.4f}s)")
            return response
        except Exception as e:
            process_time = (datetime.now() - start_time).total_seconds()
            logger.exception(
                f"!! Error during request processing for {request.method} {request.url.path} ({process_time:.4f}s): {e}"
            )
            raise

    # Include the API router
    app.include_router(api_router, prefix=config.API_PREFIX)

    @app.get("/health", tags=["Health"], summary="API Health Check")
    def health_check():
        """Returns the operational status of the API."""
        return {"status": "ok", "time": datetime.now(timezone.utc).isoformat()}

    return app


app = create_app()
