"""FastAPI 应用入口点。"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from switchhub_api.api.router import api_router
from switchhub_api.core.config import get_settings
from switchhub_api.db.session import engine
from switchhub_api.exceptions import register_exception_handlers
from switchhub_api.middlewares import register_middlewares
from switchhub_api.models import Base

settings = get_settings()
logger = logging.getLogger("switchhub_api")


def _setup_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_schema:
        Base.metadata.create_all(engine)
    logger.info("api started env=%s", settings.app_env)
    yield


def create_app() -> FastAPI:
    """创建并配置 FastAPI 应用实例。"""
    _setup_logging()
    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        debug=settings.app_debug,
        lifespan=lifespan,
        description=(
            "IoT 设备控制后台的认证接口。\n\n"
            "登录后在 Authorization 头中携带 `Bearer <token>` 访问开关接口。\n"
            "错误统一返回：`{success: false, error}`。"
        ),
        openapi_tags=[
            {"name": "health", "description": "服务存活与就绪探针。"},
            {"name": "auth", "description": "注册、登录、找回口令与注销。"},
            {"name": "switches", "description": "当前用户的设备开关状态。"},
        ],
    )

    register_middlewares(app)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()
