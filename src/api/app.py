import logging
from typing import Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .error import ClientError, ServerError

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    content = {"code": exc.status_code, "message": exc.base_error.message}
    if exc.errors is not None:
        content["errors"] = exc.errors
    if exc.error is not None:
        content["error"] = exc.error
    if exc.success is not None:
        content["success"] = exc.success
    logger.warning(f"Client error: {exc.base_error.code} on {request.url.path}")
    return JSONResponse(status_code=exc.status_code, content=content)


async def handle_server_error(request: Request, exc: ServerError):
    content = {
        "code": status.HTTP_500_INTERNAL_SERVER_ERROR,
        "message": exc.base_error.message,
        "error": exc.diagnostic or exc.base_error.code,
    }
    logger.error(f"Server error: {exc.base_error.code} on {request.url.path} ({exc.diagnostic})")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


async def handle_unexpected_error(request: Request, exc: Exception):
    logger.error(f"Unhandled {type(exc).__name__} on {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": status.HTTP_500_INTERNAL_SERVER_ERROR,
            "message": "An unexpected error occurred",
            "error": type(exc).__name__,
        },
    )


def _field_name(loc) -> str:
    # ("body", "email") -> "email"; ("query", "expires") -> "expires"
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts)


def _error_message(error: dict) -> str:
    if error.get("type") == "value_error" and "error" in error.get("ctx", {}):
        return str(error["ctx"]["error"])
    return error["msg"]


async def handle_validation_error(request: Request, exc: RequestValidationError):
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        errors.setdefault(_field_name(error["loc"]), []).append(_error_message(error))

    logger.warning(f"Validation failed on {request.url.path}: {list(errors)}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": status.HTTP_422_UNPROCESSABLE_ENTITY,
            "message": "The given data was invalid.",
            "errors": errors,
        },
    )


async def handle_http_error(request: Request, exc: StarletteHTTPException):
    content = {"code": exc.status_code, "message": exc.detail}
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        content = {
            "code": exc.status_code,
            "message": "Sorry, We Can't Find That Resource",
            "error": "Resource not found",
            "success": False,
        }
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


def create_app(ApplicationConfig) -> FastAPI:
    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="Account Service API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from src.api.routes import health
    from src.api.routes.auth import build_auth_router
    from src.api.routes.panels import ADMIN_PANEL, USER_PANEL
    from src.api.routes.profile import build_profile_router

    prefix = ApplicationConfig.API_PREFIX
    app.include_router(health.router, prefix=prefix)
    for panel in (USER_PANEL, ADMIN_PANEL):
        app.include_router(build_auth_router(panel), prefix=f"{prefix}{panel.prefix}")
        app.include_router(build_profile_router(panel), prefix=f"{prefix}{panel.prefix}")

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    return app
