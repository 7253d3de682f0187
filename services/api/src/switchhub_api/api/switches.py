"""设备开关接口，需要 Bearer 会话令牌。"""

from fastapi import APIRouter, Depends

from switchhub_api.core.security import AuthenticatedPrincipal
from switchhub_api.dependencies import get_current_principal, get_switch_service
from switchhub_api.schemas.common import ErrorResponse
from switchhub_api.schemas.switch import SwitchData, SwitchListResponse, SwitchUpsertRequest
from switchhub_api.services import SwitchService
from switchhub_api.utils.response import success

router = APIRouter(prefix="/switches", tags=["switches"])


@router.post(
    "",
    summary="写入开关状态",
    description="按名称新增或覆盖当前用户的开关状态，新增数量受上限约束。",
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}},
)
def upsert_switch(
    payload: SwitchUpsertRequest,
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SwitchService = Depends(get_switch_service),
):
    switch = service.upsert(principal, payload)
    return success(switch=SwitchData.model_validate(switch).model_dump(mode="json"))


@router.get(
    "",
    summary="查询开关列表",
    response_model=SwitchListResponse,
    responses={401: {"model": ErrorResponse}},
)
def list_switches(
    principal: AuthenticatedPrincipal = Depends(get_current_principal),
    service: SwitchService = Depends(get_switch_service),
):
    switches = service.list_switches(principal)
    return success(switches=[SwitchData.model_validate(item) for item in switches])
