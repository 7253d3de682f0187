"""请求级依赖：配置、服务装配与令牌认证。"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from switchhub_api.core.config import Settings, get_settings
from switchhub_api.core.security import AuthenticatedPrincipal, parse_authorization_header
from switchhub_api.db.session import get_db
from switchhub_api.repositories.switch_repository import SwitchRepository
from switchhub_api.repositories.user_repository import UserRepository
from switchhub_api.services import AuthService, SwitchService

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> AuthService:
    return AuthService(UserRepository(db), settings)


def get_switch_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SwitchService:
    return SwitchService(SwitchRepository(db), settings)


def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
) -> AuthenticatedPrincipal:
    """提取并校验 Bearer 会话令牌。"""
    authorization = None
    if credentials is not None and credentials.credentials:
        authorization = f"{credentials.scheme} {credentials.credentials}"
    return parse_authorization_header(authorization, settings.auth_jwt_secret)
