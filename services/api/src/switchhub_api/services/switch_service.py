"""用户开关状态服务。"""

import logging
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError

from switchhub_api.core.config import Settings
from switchhub_api.core.security import INVALID_TOKEN_MESSAGE, AuthenticatedPrincipal
from switchhub_api.exceptions import AuthError, InternalError, LimitError
from switchhub_api.models.switch import Switch
from switchhub_api.repositories.switch_repository import SwitchRepository
from switchhub_api.schemas.switch import SwitchUpsertRequest

logger = logging.getLogger(__name__)


class SwitchService:
    def __init__(self, repo: SwitchRepository, settings: Settings):
        self.repo = repo
        self.settings = settings

    def _owner_id(self, principal: AuthenticatedPrincipal) -> UUID:
        """令牌有效但账号已注销时同样按令牌失效处理。"""
        try:
            user_id = UUID(principal.user_id)
        except ValueError as exc:
            raise AuthError(INVALID_TOKEN_MESSAGE) from exc
        if not self.repo.user_exists(user_id):
            raise AuthError(INVALID_TOKEN_MESSAGE)
        return user_id

    def upsert(self, principal: AuthenticatedPrincipal, request: SwitchUpsertRequest) -> Switch:
        """写入开关状态，新增开关受每用户数量上限约束。"""
        try:
            user_id = self._owner_id(principal)
            switch = self.repo.get(user_id, request.label)
            if switch is None:
                limit = self.settings.switch_limit_per_user
                if self.repo.count(user_id) >= limit:
                    raise LimitError(f"Switch limit reached ({limit})")
                switch = Switch(user_id=user_id, label=request.label, state=request.state)
            else:
                switch.state = request.state
            return self.repo.save(switch)
        except SQLAlchemyError as exc:
            self.repo.rollback()
            logger.exception("switch store failure user_id=%s", principal.user_id)
            raise InternalError("Internal server error (switch)") from exc

    def list_switches(self, principal: AuthenticatedPrincipal) -> list[Switch]:
        try:
            return self.repo.list_for_user(self._owner_id(principal))
        except SQLAlchemyError as exc:
            logger.exception("switch store failure user_id=%s", principal.user_id)
            raise InternalError("Internal server error (switch)") from exc
