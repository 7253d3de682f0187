"""认证业务编排：注册、登录、找回与注销。

每个操作都是请求到响应的映射，依赖（存储、配置）在构造时注入。
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import uuid4

from fastapi import status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from switchhub_api.core.config import Settings
from switchhub_api.exceptions import AuthError, ConflictError, InternalError, NotFoundError, ValidationError
from switchhub_api.models.user import User
from switchhub_api.repositories.user_repository import UserRepository
from switchhub_api.schemas.auth import (
    AnyAuthRequest,
    DeleteRequest,
    ForgotLookupRequest,
    ForgotResetRequest,
    LoginRequest,
    SafeUser,
    SignupRequest,
)
from switchhub_api.services.local_auth import (
    generate_recovery_code,
    generate_salt,
    issue_session_token,
    salted_digest,
    verify_digest,
)
from switchhub_api.utils.response import success

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"
INVALID_RECOVERY_CODE = "Invalid recovery code"
FORGOT_LOOKUP_MESSAGE = "If an account exists, instructions were sent."


class AuthService:
    def __init__(self, repo: UserRepository, settings: Settings):
        self.repo = repo
        self.settings = settings

    def handle(self, request: AnyAuthRequest) -> tuple[int, dict[str, Any]]:
        """按请求类型分发，返回 (状态码, 响应体)。"""
        if isinstance(request, SignupRequest):
            return status.HTTP_201_CREATED, self.signup(request)
        if isinstance(request, LoginRequest):
            return status.HTTP_200_OK, self.login(request)
        if isinstance(request, ForgotResetRequest):
            return status.HTTP_200_OK, self.forgot_reset(request)
        if isinstance(request, ForgotLookupRequest):
            return status.HTTP_200_OK, self.forgot_lookup(request)
        if isinstance(request, DeleteRequest):
            return status.HTTP_200_OK, self.delete(request)
        raise ValidationError("Unknown action")

    @contextmanager
    def _store_errors(self, operation: str) -> Iterator[None]:
        """将存储层异常转换为笼统的 500，细节只写日志。"""
        try:
            yield
        except SQLAlchemyError as exc:
            self.repo.rollback()
            logger.exception("credential store failure during %s", operation)
            raise InternalError(f"Internal server error ({operation})") from exc

    def _check_password_policy(self, password: str) -> None:
        if len(password) < self.settings.auth_password_min_length:
            raise ValidationError(
                f"Password must be at least {self.settings.auth_password_min_length} characters"
            )

    def _new_recovery_code(self) -> str:
        return generate_recovery_code(self.settings.auth_recovery_code_length)

    def signup(self, request: SignupRequest) -> dict[str, Any]:
        """创建账号，找回码明文只在本次响应中返回。"""
        self._check_password_policy(request.password)
        salt = generate_salt()
        recovery_code = self._new_recovery_code()
        user = User(
            id=uuid4(),
            email=request.email,
            name=request.name,
            salt=salt,
            password_digest=salted_digest(request.password, salt),
            recovery_code_digest=salted_digest(recovery_code, salt),
            phone=request.phone,
            gender=request.gender,
        )

        with self._store_errors("signup"):
            if self.repo.exists(request.email):
                raise ConflictError("User already exists")
            try:
                self.repo.insert(user)
            except IntegrityError as exc:
                # 并发注册同一邮箱时由唯一约束兜底。
                self.repo.rollback()
                raise ConflictError("User already exists") from exc

        logger.info("user signed up email=%s", request.email)
        return success("Signup successful", recovery_code=recovery_code)

    def login(self, request: LoginRequest) -> dict[str, Any]:
        """校验口令并签发会话令牌；用户不存在与口令错误返回相同结果。"""
        with self._store_errors("login"):
            user = self.repo.get_by_email(request.email)
        if user is None or not verify_digest(request.password, user.salt, user.password_digest):
            raise AuthError(INVALID_CREDENTIALS)

        token, _ = issue_session_token(user, self.settings)
        safe_user = SafeUser(
            id=str(user.id),
            name=user.name,
            email=user.email,
            phone=user.phone,
            gender=user.gender,
        )
        return success("Login successful", token=token, user=safe_user.model_dump())

    def forgot_lookup(self, request: ForgotLookupRequest) -> dict[str, Any]:
        """不查询存储，无论账号是否存在都返回同一提示。"""
        return success(FORGOT_LOOKUP_MESSAGE)

    def forgot_reset(self, request: ForgotResetRequest) -> dict[str, Any]:
        """凭找回码重置口令，并轮换盐与找回码。"""
        self._check_password_policy(request.new_password)
        with self._store_errors("forgot"):
            user = self.repo.get_by_email(request.email)
            if user is None or not verify_digest(request.recovery_code, user.salt, user.recovery_code_digest):
                raise AuthError(INVALID_RECOVERY_CODE)

            salt = generate_salt()
            recovery_code = self._new_recovery_code()
            replaced = self.repo.replace_credentials(
                user.id,
                expected_recovery_code_digest=user.recovery_code_digest,
                salt=salt,
                password_digest=salted_digest(request.new_password, salt),
                recovery_code_digest=salted_digest(recovery_code, salt),
            )
        if not replaced:
            # 并发重置时找回码已被另一请求消费。
            raise AuthError(INVALID_RECOVERY_CODE)

        logger.info("password reset via recovery code email=%s", request.email)
        return success("Password reset successful", recovery_code=recovery_code)

    def delete(self, request: DeleteRequest) -> dict[str, Any]:
        """删除账号及其开关。"""
        with self._store_errors("delete"):
            deleted = self.repo.delete_by_email(request.email)
        if not deleted:
            raise NotFoundError("User not found")

        logger.info("account deleted email=%s", request.email)
        return success("Account deleted")
