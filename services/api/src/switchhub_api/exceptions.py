"""业务异常分类与异常处理注册。"""

import logging
import uuid
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from switchhub_api.core.config import get_settings
from switchhub_api.utils.response import DEFAULT_ERROR_MESSAGE, error_payload

logger = logging.getLogger(__name__)


class AppError(Exception):
    """业务异常基类，携带对外状态码与可直接返回给客户端的消息。"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, details: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(AppError):
    """缺失或非法的请求参数。"""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthError(AppError):
    """凭据或找回码校验失败，消息保持笼统。"""

    status_code = status.HTTP_401_UNAUTHORIZED


class LimitError(AppError):
    """配额类限制。"""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT


class InternalError(AppError):
    """存储或加密失败，详细原因只写日志。"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


def normalize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """将参数校验错误整理为 {field, message, type} 列表。"""
    return [
        {
            "field": ".".join(str(item) for item in err.get("loc", []) if item not in ("body", "query")),
            "message": err.get("msg"),
            "type": err.get("type"),
        }
        for err in errors
    ]


async def app_error_handler(request: Request, exc: AppError):
    """将业务异常包装为标准错误结构。"""
    return JSONResponse(status_code=exc.status_code, content=error_payload(exc.message, exc.details))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """未知路由、方法不允许等协议异常。"""
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """请求体无法解析或查询参数非法时统一返回 400。"""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_payload("Invalid request", normalize_validation_errors(exc.errors())),
    )


async def unexpected_exception_handler(request: Request, exc: Exception):
    """处理未捕获异常，避免内部细节泄露。

    该处理器运行在 http 中间件之外，跨域头与请求 ID 需在此补齐。
    """
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    headers = {
        **get_settings().cors_headers,
        "X-Request-Id": getattr(request.state, "request_id", None) or str(uuid.uuid4()),
    }
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_payload(DEFAULT_ERROR_MESSAGE),
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """集中注册异常处理器。"""
    app.exception_handler(AppError)(app_error_handler)
    app.exception_handler(StarletteHTTPException)(http_exception_handler)
    app.exception_handler(RequestValidationError)(validation_exception_handler)
    app.exception_handler(Exception)(unexpected_exception_handler)
