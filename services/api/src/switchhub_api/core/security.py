"""会话令牌编解码与认证头解析。

令牌格式为 `header.claims.signature`，三段均为无填充 base64url，
签名算法固定为 HS256。校验失败一律返回 None，不向调用方抛出异常。
"""

import binascii
import logging
import re
import time
from dataclasses import dataclass
from typing import Any

import jwt
from jwt import InvalidTokenError
from jwt.utils import base64url_decode, base64url_encode

from switchhub_api.exceptions import AuthError

logger = logging.getLogger(__name__)

SESSION_TOKEN_ALGORITHM = "HS256"
INVALID_TOKEN_MESSAGE = "Invalid or expired token"

# 过期判断由本模块按 `now >= exp` 自行完成，签发时间不参与校验。
_DECODE_OPTIONS = {
    "require": ["exp"],
    "verify_signature": True,
    "verify_exp": False,
    "verify_iat": False,
}


@dataclass
class AuthenticatedPrincipal:
    """已通过令牌校验的调用方。"""

    # 用户 ID（令牌 id 声明）。
    user_id: str
    # 用户邮箱。
    email: str | None
    # 原始声明集。
    claims: dict[str, Any]


def _is_numeric(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def encode_session_token(claims: dict[str, Any], secret: str) -> str:
    """签发会话令牌，声明中必须带有 exp。"""
    if not _is_numeric(claims.get("exp")):
        raise ValueError("session token claims must include a numeric exp")
    return jwt.encode(claims, secret, algorithm=SESSION_TOKEN_ALGORITHM)


def _has_canonical_signature(signature_segment: str) -> bool:
    """拒绝解码结果相同但编码不同的签名段（如末位填充比特被改动）。"""
    try:
        canonical = base64url_encode(base64url_decode(signature_segment)).decode("ascii")
    except (ValueError, binascii.Error):
        return False
    return canonical == signature_segment


def decode_session_token(token: object, secret: str, *, now: float | None = None) -> dict[str, Any] | None:
    """校验会话令牌并返回声明集，任何失败都返回 None。"""
    if not isinstance(token, str):
        return None
    parts = token.split(".")
    if len(parts) != 3 or not all(parts):
        return None

    try:
        claims = jwt.decode(
            token,
            key=secret,
            algorithms=[SESSION_TOKEN_ALGORITHM],
            options=_DECODE_OPTIONS,
        )
    except InvalidTokenError as exc:
        logger.debug("session token rejected: %s", exc)
        return None

    if not _has_canonical_signature(parts[2]):
        return None

    exp = claims.get("exp")
    if not _is_numeric(exp):
        return None
    current = time.time() if now is None else now
    if current >= exp:
        return None
    return claims


def _extract_bearer_token(authorization: str | None) -> str | None:
    """从 Authorization 头中提取 Bearer token，兼容重复头被逗号拼接的场景。"""
    if not authorization:
        return None
    tokens = re.findall(r"Bearer\s+([^,\s]+)", authorization, flags=re.IGNORECASE)
    for candidate in reversed(tokens):
        token = candidate.strip()
        if token:
            return token
    return None


def parse_authorization_header(authorization: str | None, secret: str) -> AuthenticatedPrincipal:
    """解析认证头并返回认证主体，失败时抛出 401。"""
    token = _extract_bearer_token(authorization)
    claims = decode_session_token(token, secret) if token else None
    if claims is None:
        raise AuthError(INVALID_TOKEN_MESSAGE)

    user_id = str(claims.get("id") or "").strip()
    if not user_id:
        raise AuthError(INVALID_TOKEN_MESSAGE)

    email = claims.get("email")
    return AuthenticatedPrincipal(
        user_id=user_id,
        email=email if isinstance(email, str) else None,
        claims=claims,
    )
