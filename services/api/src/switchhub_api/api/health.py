"""健康检查接口。"""

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.orm import Session

from switchhub_api.db.session import get_db
from switchhub_api.schemas.common import ErrorResponse, HealthStatusResponse
from switchhub_api.utils.response import success

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "/live",
    summary="存活探针",
    response_model=HealthStatusResponse,
)
def live():
    """仅表示进程存活，不校验外部依赖。"""
    return success(status="ok")


@router.get(
    "/ready",
    summary="就绪探针",
    response_model=HealthStatusResponse,
    responses={500: {"model": ErrorResponse}},
)
def ready(db: Session = Depends(get_db)):
    """执行轻量数据库探活语句验证存储可用。"""
    db.execute(text("select 1"))
    return success(status="ready")
