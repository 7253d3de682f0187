"""应用中间件注册。"""

from time import perf_counter
import uuid

from fastapi import FastAPI, Request, Response, status

from switchhub_api.core.config import get_settings


async def cors_middleware(request: Request, call_next):
    """所有响应附带跨域头，预检请求直接返回 204。"""
    headers = get_settings().cors_headers
    if request.method == "OPTIONS":
        return Response(status_code=status.HTTP_204_NO_CONTENT, headers=headers)
    response = await call_next(request)
    response.headers.update(headers)
    return response


async def request_id_middleware(request: Request, call_next):
    """注入请求追踪 ID，并通过响应头返回。"""
    request.state.request_id = str(uuid.uuid4())
    request.state.request_started_at = perf_counter()
    response = await call_next(request)
    response.headers["X-Request-Id"] = request.state.request_id
    elapsed = perf_counter() - request.state.request_started_at
    response.headers["X-Process-Time-Ms"] = str(round(elapsed * 1000, 2))
    return response


def register_middlewares(app: FastAPI) -> None:
    """集中注册中间件，后注册的位于外层。"""
    app.middleware("http")(cors_middleware)
    app.middleware("http")(request_id_middleware)
