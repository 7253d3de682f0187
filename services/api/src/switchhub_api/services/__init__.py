"""业务服务导出集合。"""

from switchhub_api.services.auth_service import AuthService
from switchhub_api.services.local_auth import (
    digest,
    generate_recovery_code,
    generate_salt,
    issue_session_token,
    salted_digest,
    verify_digest,
)
from switchhub_api.services.switch_service import SwitchService

__all__ = [
    "AuthService",
    "SwitchService",
    "digest",
    "generate_recovery_code",
    "generate_salt",
    "issue_session_token",
    "salted_digest",
    "verify_digest",
]
