"""
异常处理
将服务层异常、请求校验异常与 HTTP 异常统一渲染为
{"success": false, "error": ..., "errors": [...]} 结构
"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.config import settings
from app.services.errors import ServiceError, ValidationFailure, PersistenceFailure

logger = logging.getLogger(__name__)


def error_body(message: str, errors=None, detail=None) -> dict:
    body = {"success": False, "error": message}
    if errors:
        body["errors"] = errors
    if detail and settings.DEBUG:
        body["detail"] = detail
    return body


def _format_validation_error(err: dict) -> str:
    loc = [str(p) for p in err.get("loc", ()) if p != "body"]
    field = ".".join(loc)
    return f"{field}: {err.get('msg')}" if field else err.get("msg", "Invalid value")


def setup_exception_handlers(app: FastAPI):

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        errors = exc.errors if isinstance(exc, ValidationFailure) else None
        detail = exc.detail if isinstance(exc, PersistenceFailure) else None
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({detail})")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.message, errors=errors, detail=detail)
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        errors = [_format_validation_error(err) for err in exc.errors()]
        return JSONResponse(status_code=400, content=error_body("Validation failed", errors=errors))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = str(exc.detail)
        if exc.status_code == 404 and message == "Not Found":
            message = "Endpoint not found"
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(message),
            headers=getattr(exc, "headers", None)
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=500,
            content=error_body("Internal server error", detail=str(exc))
        )
