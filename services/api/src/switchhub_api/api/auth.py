"""认证接口。

同时提供按 action 分发的单入口（`/auth`）与 REST 风格路径（`/auth/{action}`），
两者语义一致。
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request
from fastapi.responses import JSONResponse

from switchhub_api.dependencies import get_auth_service
from switchhub_api.schemas.auth import parse_auth_request
from switchhub_api.schemas.common import ErrorResponse
from switchhub_api.services import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def _dispatch(service: AuthService, body: Any, action: str | None) -> JSONResponse:
    auth_request = parse_auth_request(body, action)
    status_code, payload = service.handle(auth_request)
    return JSONResponse(status_code=status_code, content=payload)


@router.post(
    "",
    summary="认证动作入口",
    description="按请求体或查询参数中的 action（signup/login/forgot/delete）执行认证操作。",
    responses=_ERROR_RESPONSES,
)
def auth_action(
    body: dict[str, Any] | None = Body(default=None),
    action: str | None = Query(default=None, description="请求体未携带 action 时使用。"),
    service: AuthService = Depends(get_auth_service),
):
    """执行 action 指定的认证操作。"""
    return _dispatch(service, body, action)


@router.get(
    "",
    summary="认证动作入口（查询参数）",
    description="与 POST 相同，字段全部取自查询参数，适用于不便发送请求体的设备端。",
    responses=_ERROR_RESPONSES,
)
def auth_action_query(request: Request, service: AuthService = Depends(get_auth_service)):
    """以查询参数作为请求体执行认证操作。"""
    return _dispatch(service, dict(request.query_params), None)


@router.post(
    "/{action}",
    summary="认证操作（REST 风格）",
    description="路径中的 action 优先于请求体中的 action。",
    responses=_ERROR_RESPONSES,
)
def auth_action_path(
    action: str,
    body: dict[str, Any] | None = Body(default=None),
    service: AuthService = Depends(get_auth_service),
):
    """执行路径指定的认证操作。"""
    return _dispatch(service, {**(body or {}), "action": action}, None)
