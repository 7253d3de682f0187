"""统一响应结构工具。"""

from typing import Any

DEFAULT_ERROR_MESSAGE = "Internal server error"


def success(message: str | None = None, **data: Any) -> dict[str, Any]:
    """构造统一成功响应结构。"""
    payload: dict[str, Any] = {"success": True}
    if message is not None:
        payload["message"] = message
    payload.update(data)
    return payload


def error_payload(message: str, details: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """构造统一错误响应结构。

    同一错误的响应体必须逐字节一致，因此这里不写入请求 ID 或时间戳，
    请求 ID 通过响应头返回。
    """
    payload: dict[str, Any] = {"success": False, "error": message}
    if details:
        payload["details"] = details
    return payload
