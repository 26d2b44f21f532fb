"""
Client Gallery API - Main Entry Point

Photographers (admins) create galleries, upload photos and share them
with clients, who view and favorite photos.

This is the FastAPI application entry point.
Uses core/ for configuration, exceptions, and logging.
"""

from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

# Core imports
from core.config import settings, VERSION
from core.exceptions import AppException, StorageError
from core.responses import ApiError, HealthResponse
from core.logging import setup_logging, get_logger, log_error

# Setup logging first
setup_logging(level="DEBUG" if settings.debug else settings.log_level)
logger = get_logger(__name__)

from infrastructure import build_backends
from middleware import AuthMiddleware, RequestLoggingMiddleware
from repositories import AdminsRepository, ClientsRepository, GalleriesRepository
from services import AccountService, AuthService, GalleryService
from routers import admin, client, deps

# ============================================================
# Service Initialization (Dependency Injection)
# ============================================================

logger.info(f"Starting Client Gallery API v{VERSION}")

# 1. External backends
backends = build_backends(settings)

# 2. Repositories
galleries_repo = GalleriesRepository(backends.documents)
admins_repo = AdminsRepository(backends.documents)
clients_repo = ClientsRepository(backends.documents)

# 3. Services
auth_service = AuthService(backends.identity, enforce_admin_role=settings.enforce_admin_role)
account_service = AccountService(backends.identity, admins_repo, clients_repo)
gallery_service = GalleryService(
    galleries_repo,
    clients_repo,
    backends.blobs,
    signed_url_ttl=settings.signed_url_ttl,
    write_retries=settings.write_retries,
)

# 4. Inject services into routers
deps.set_services(auth_service, account_service, gallery_service)
logger.info("✓ Service instances injected into routers")

# ============================================================
# Application Setup
# ============================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Make sure the private photo bucket exists; a failure is logged, not fatal."""
    try:
        await backends.blobs.ensure_bucket()
    except StorageError as e:
        logger.error(f"Photo bucket unavailable: {e.message}")
    yield


API_PREFIX = settings.api_prefix.rstrip("/")

app = FastAPI(
    title="Client Gallery API",
    description="Photo gallery sharing between photographers and their clients",
    version=VERSION,
    docs_url=f"{API_PREFIX}/docs",
    redoc_url=None,
    openapi_url=f"{API_PREFIX}/openapi.json",
    lifespan=lifespan,
)

# Middleware order: last added runs first (CORS -> logging -> auth)
app.add_middleware(AuthMiddleware, auth_service=auth_service, api_prefix=API_PREFIX)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,
)

logger.info("Middleware configured")

# ============================================================
# Global Exception Handlers
# ============================================================

@app.exception_handler(AppException)
async def app_exception_handler(request: Request, exc: AppException):
    """
    Handle all custom AppException and subclasses.
    Returns {"error": message} with the exception's status.
    """
    if exc.status_code >= 500:
        logger.error(f"AppException: {exc.code} - {exc.message} {exc.details or ''}".strip())
    else:
        logger.warning(f"AppException: {exc.code} - {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ApiError.from_exception(exc).model_dump()
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are 400s in this API."""
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ())[1:])
        problems.append(f"{location}: {error.get('msg')}" if location else error.get("msg", "Invalid request"))
    message = "; ".join(problems) or "Invalid request"
    logger.warning(f"Validation failed for {request.method} {request.url.path}: {message}")
    return JSONResponse(status_code=400, content=ApiError.fail(message).model_dump())


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=ApiError.fail(str(exc.detail)).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """
    Handle unexpected exceptions.
    Logs full traceback and returns generic error.
    """
    log_error(logger, exc, context=f"{request.method} {request.url.path}")
    return JSONResponse(
        status_code=500,
        content=ApiError.fail("Internal server error").model_dump()
    )

# ============================================================
# Root Endpoints
# ============================================================

@app.get(f"{API_PREFIX}/health", response_model=HealthResponse)
async def health_check():
    """Liveness probe."""
    return HealthResponse()

# ============================================================
# Router Registration
# ============================================================

app.include_router(admin.router, prefix=API_PREFIX, tags=["admin"])
app.include_router(client.router, prefix=API_PREFIX, tags=["client"])

logger.info(f"Application startup complete. Running on {settings.server_host}:{settings.server_port}")

# ============================================================
# Entry Point
# ============================================================

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug
    )
