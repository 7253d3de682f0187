"""本地账号凭据工具：摘要、找回码与会话令牌签发。"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import datetime, timedelta, timezone

from switchhub_api.core.config import Settings
from switchhub_api.core.security import encode_session_token
from switchhub_api.models.user import User

RECOVERY_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"
DEFAULT_RECOVERY_CODE_LENGTH = 12


def digest(data: bytes | str) -> str:
    """计算 SHA-256 摘要，返回 64 位小写十六进制字符串。"""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def generate_salt() -> str:
    """生成用户级随机盐。"""
    return secrets.token_hex(16)


def salted_digest(secret: str, salt: str) -> str:
    """对 secret + salt 计算摘要，口令与找回码共用同一规则。"""
    return digest(secret + salt)


def verify_digest(secret: str, salt: str, expected_digest: str) -> bool:
    """以常量时间比较候选值摘要与已存摘要。"""
    return hmac.compare_digest(salted_digest(secret, salt), expected_digest)


def generate_recovery_code(length: int = DEFAULT_RECOVERY_CODE_LENGTH) -> str:
    """生成找回码。

    每个字符取自一个安全随机字节对字母表长度取模，存在轻微分布偏差。
    """
    if length <= 0:
        raise ValueError("length must be positive")
    raw = secrets.token_bytes(length)
    return "".join(RECOVERY_CODE_ALPHABET[byte % len(RECOVERY_CODE_ALPHABET)] for byte in raw)


def issue_session_token(user: User, settings: Settings) -> tuple[str, int]:
    """签发会话令牌，返回令牌与过期时间戳。"""
    now = datetime.now(timezone.utc)
    expires_at = now + timedelta(seconds=settings.auth_token_ttl_seconds)
    claims: dict[str, object] = {
        "id": str(user.id),
        "email": user.email,
        "iat": int(now.timestamp()),
        "exp": int(expires_at.timestamp()),
    }
    token = encode_session_token(claims, settings.auth_jwt_secret)
    return token, claims["exp"]
