"""Error Handlers — global exception handlers for the Zora Agent app.

Invariants:
    - ZoraAgentError → structured JSON with error code, message, severity;
      browser requests (Accept: text/html) get a redirect (401 → /login,
      403 → /pricing?upgrade=required) or the HTML error page instead
    - 429 responses carry a Retry-After header
    - RequestValidationError → 400 with field-level error details
    - Exception (catch-all) → 500; stack trace included only outside production

Design Decisions:
    - Three-layer handler: domain (ZoraAgentError), validation (Pydantic), catch-all (Exception)
    - Extracted from main.py to keep its import fan-out small
"""

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse

from zora_agent.api.templating import render
from zora_agent.core.errors import ErrorSeverity, ZoraAgentError

logger = logging.getLogger(__name__)

BROWSER_REDIRECTS = {
    status.HTTP_401_UNAUTHORIZED: "/login",
    status.HTTP_403_FORBIDDEN: "/pricing?upgrade=required",
}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def wants_html(request: Request) -> bool:
    accept = request.headers.get("accept", "")
    return "text/html" in accept and "application/json" not in accept


def _is_production(request: Request) -> bool:
    container = getattr(request.app.state, "container", None)
    return container is not None and container.settings.is_production


def _register_domain_error_handler(app: FastAPI) -> None:
    """Register Zora Agent domain/infrastructure error handler."""

    @app.exception_handler(ZoraAgentError)
    async def domain_error_handler(request: Request, exc: ZoraAgentError):
        """Handle all Zora Agent domain/infrastructure errors."""
        log = logger.error if exc.http_status >= 500 else logger.warning
        log(
            f"ZoraAgentError: {exc.message}",
            extra={
                "error_code": exc.code,
                "path": request.url.path,
                "status_code": exc.http_status,
            },
        )
        if wants_html(request):
            target = BROWSER_REDIRECTS.get(exc.http_status)
            if target:
                return RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
            return render(
                request, "error.html",
                {"status_code": exc.http_status, "message": exc.message},
                status_code=exc.http_status,
            )
        headers = None
        if exc.context.retry_after_seconds is not None:
            headers = {"Retry-After": str(exc.context.retry_after_seconds)}
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(), headers=headers,
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all. Stack trace only leaves the process outside production."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        error = {
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred",
            "category": "internal",
            "severity": ErrorSeverity.CRITICAL.value,
        }
        if not _is_production(request):
            error["stack"] = traceback.format_exception(exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": error},
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Invalid request data",
            "category": "validation",
            "severity": ErrorSeverity.ERROR.value,
            "details": [
                {
                    "field": ".".join(str(loc) for loc in e["loc"]),
                    "message": e["msg"],
                    "type": e["type"],
                }
                for e in exc.errors()
            ],
        },
    }
