"""
API Middleware - Security and error handling for the REST surface.

Provides:
- Localhost-only access enforcement
- Unified error response formatting
- Request logging
"""

import time
import traceback
from typing import Callable

from aiohttp import web

from ..core.logging_utils import get_module_logger


logger = get_module_logger("APIMiddleware")

LOCALHOST_IPS = {"127.0.0.1", "::1", "::ffff:127.0.0.1"}


@web.middleware
async def localhost_only_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    """Reject requests from any IP other than localhost."""
    peername = request.transport.get_extra_info("peername") if request.transport else None
    if peername:
        remote_ip = peername[0]
        if remote_ip not in LOCALHOST_IPS:
            logger.warning("Rejected request from non-localhost IP: %s", remote_ip)
            return create_error_response(
                "ACCESS_DENIED",
                "API access is restricted to localhost only",
                status=403,
            )

    return await handler(request)


@web.middleware
async def request_logging_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    """Log method, path, status and timing of every request."""
    start_time = time.perf_counter()
    response = await handler(request)
    elapsed_ms = (time.perf_counter() - start_time) * 1000
    logger.debug("%s %s -> %s (%.1fms)", request.method, request.path, response.status, elapsed_ms)
    return response


@web.middleware
async def error_handling_middleware(request: web.Request, handler: Callable) -> web.StreamResponse:
    """
    Catch and format all errors as JSON responses.

    {
        "error": {"code": "ERROR_CODE", "message": "Human-readable message"},
        "status": 500
    }
    """
    try:
        return await handler(request)
    except web.HTTPException as e:
        return create_error_response(
            e.reason.upper().replace(" ", "_") if e.reason else "HTTP_ERROR",
            e.text or str(e),
            status=e.status,
        )
    except ValueError as e:
        logger.warning("Validation error: %s", e)
        return create_error_response("VALIDATION_ERROR", str(e), status=400)
    except KeyError as e:
        logger.warning("Missing field: %s", e)
        return create_error_response("MISSING_FIELD", f"Missing required field: {e}", status=400)
    except Exception as e:
        logger.error("Unexpected error: %s\n%s", e, traceback.format_exc())
        return create_error_response(
            "INTERNAL_ERROR",
            "An unexpected error occurred",
            status=500,
            details={"type": type(e).__name__, "message": str(e)},
        )


def create_error_response(code: str, message: str, status: int = 400, details: dict = None) -> web.Response:
    """Create standardized error response."""
    error = {"error": {"code": code, "message": message}, "status": status}
    if details:
        error["error"]["details"] = details
    return web.json_response(error, status=status)


async def parse_json_body(request: web.Request, required: bool = True):
    """Parse JSON body with error handling. Returns (body, error_response)."""
    try:
        body = await request.json()
    except Exception:
        if required:
            return None, create_error_response("INVALID_BODY", "Request body must be valid JSON", status=400)
        return {}, None
    if required and body in (None, "", {}, []):
        return None, create_error_response("EMPTY_BODY", "Request body must contain data", status=400)
    return body, None
