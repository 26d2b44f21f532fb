"""
Authentication Middleware for FastAPI
Resolves the bearer token of every API request into an Identity.

Rules:
- OPTIONS: Always allowed (CORS preflight)
- Public paths (health, admin sign-up, docs): no token needed
- Everything else under the API prefix: token required, resolved
  identity stored on request.state.identity
- Paths outside the API prefix: passed through (404 downstream)
"""

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from core.exceptions import AppException
from core.logging import get_logger
from core.responses import ApiError
from services.auth import AuthService

logger = get_logger(__name__)

PUBLIC_SUFFIXES = (
    "/health",
    "/admin/signup",
    "/docs",
    "/docs/oauth2-redirect",
    "/openapi.json",
)


class AuthMiddleware(BaseHTTPMiddleware):

    def __init__(self, app, auth_service: AuthService, api_prefix: str = "/api/v1"):
        super().__init__(app)
        self.auth_service = auth_service
        self.api_prefix = api_prefix.rstrip("/")
        self.public_paths = {f"{self.api_prefix}{suffix}" for suffix in PUBLIC_SUFFIXES}

    async def dispatch(self, request: Request, call_next):
        path = request.url.path.rstrip("/") or "/"  # Normalize trailing slash
        method = request.method

        # 1. OPTIONS: always allow (CORS preflight)
        if method == "OPTIONS":
            return await call_next(request)

        # 2. Public paths: always allow
        if path in self.public_paths:
            return await call_next(request)

        # 3. Outside the API: nothing to protect
        if not path.startswith(self.api_prefix):
            return await call_next(request)

        # 4. Everything else needs a resolvable bearer token
        try:
            identity = await self.auth_service.authenticate(request.headers.get("Authorization"))
        except AppException as e:
            if e.status_code == 401:
                logger.warning(f"Auth middleware: {e.message} for {method} {path}")
            else:
                logger.error(f"Auth middleware: {e.message} for {method} {path}")
            return JSONResponse(
                ApiError.from_exception(e).model_dump(),
                status_code=e.status_code
            )

        request.state.identity = identity
        logger.debug(f"Auth middleware: {identity.role.value} {identity.id} -> {method} {path}")

        return await call_next(request)
