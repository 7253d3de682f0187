"""认证请求结构。

所有认证动作共用一个入口，按 `action` 区分请求类型；`forgot` 在携带
`recovery_code` 或 `new_password` 任一字段时视为重置请求，否则为查询请求。
"""

from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    StringConstraints,
    Tag,
    TypeAdapter,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from switchhub_api.exceptions import ValidationError, normalize_validation_errors
from switchhub_api.schemas.common import BaseSchema

AUTH_ACTIONS = ("signup", "login", "forgot", "delete")

MISSING_FIELD_MESSAGES = {
    "signup": "Missing required fields: name, email, password",
    "login": "Missing email or password",
    "forgot": "Missing email",
    "forgot_reset": "Missing recovery_code or new_password",
    "delete": "Missing email",
}

_MISSING_ERROR_TYPES = {"missing", "string_too_short"}

TrimmedName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=128)]
Email = Annotated[
    str,
    StringConstraints(
        strip_whitespace=True,
        to_lower=True,
        min_length=1,
        max_length=256,
    ),
]
Secret = Annotated[str, Field(min_length=1, max_length=256)]
OptionalText = Annotated[str, StringConstraints(strip_whitespace=True, max_length=32)] | None


class AuthRequest(BaseModel):
    """认证请求基类，拒绝未声明字段。"""

    model_config = ConfigDict(extra="forbid")

    @field_validator("email", check_fields=False)
    @classmethod
    def validate_email_shape(cls, value: str) -> str:
        local, _, domain = value.partition("@")
        host, _, suffix = domain.rpartition(".")
        if not local or not host or not suffix or any(ch.isspace() for ch in value) or "@" in domain:
            raise ValueError("invalid email address")
        return value


class SignupRequest(AuthRequest):
    """注册请求。"""

    action: Literal["signup"]
    name: TrimmedName
    email: Email
    password: Secret
    phone: OptionalText = None
    gender: OptionalText = None


class LoginRequest(AuthRequest):
    """登录请求。"""

    action: Literal["login"]
    email: Email
    password: Secret


class ForgotLookupRequest(AuthRequest):
    """找回查询请求，仅返回笼统提示。"""

    action: Literal["forgot"]
    email: Email


class ForgotResetRequest(AuthRequest):
    """凭找回码重置口令。"""

    action: Literal["forgot"]
    email: Email
    recovery_code: Secret
    new_password: Secret


class DeleteRequest(AuthRequest):
    """注销账号请求。"""

    action: Literal["delete"]
    email: Email


def _auth_request_tag(value: Any) -> str | None:
    if isinstance(value, dict):
        action = value.get("action")
        if action == "forgot" and ("recovery_code" in value or "new_password" in value):
            return "forgot_reset"
        return action if isinstance(action, str) else None
    if isinstance(value, ForgotResetRequest):
        return "forgot_reset"
    return getattr(value, "action", None)


AnyAuthRequest = Annotated[
    Union[
        Annotated[SignupRequest, Tag("signup")],
        Annotated[LoginRequest, Tag("login")],
        Annotated[ForgotLookupRequest, Tag("forgot")],
        Annotated[ForgotResetRequest, Tag("forgot_reset")],
        Annotated[DeleteRequest, Tag("delete")],
    ],
    Discriminator(_auth_request_tag),
]

_auth_request_adapter = TypeAdapter(AnyAuthRequest)


def parse_auth_request(body: Any, action: str | None = None) -> AnyAuthRequest:
    """将原始请求体解析为具体的认证请求。

    `action` 取自请求体，缺省时取路径或查询参数，大小写不敏感。
    """
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise ValidationError("Invalid request body")

    data = dict(body)
    raw_action = data.get("action") or action
    if not raw_action:
        raise ValidationError("Missing action")
    if not isinstance(raw_action, str) or raw_action.strip().lower() not in AUTH_ACTIONS:
        raise ValidationError("Unknown action")
    data["action"] = raw_action.strip().lower()
    # 空值字段按缺失处理。
    data = {key: value for key, value in data.items() if value is not None and value != ""}

    tag = _auth_request_tag(data)
    try:
        return _auth_request_adapter.validate_python(data)
    except PydanticValidationError as exc:
        errors = exc.errors()
        for err in errors:
            # 去掉联合类型的标签前缀，仅保留字段路径。
            if err.get("loc") and err["loc"][0] == tag:
                err["loc"] = err["loc"][1:]
        details = normalize_validation_errors(errors)
        if any(err.get("type") == "extra_forbidden" for err in errors):
            fields = ", ".join(sorted(item["field"] for item in details if item["type"] == "extra_forbidden"))
            raise ValidationError(f"Unexpected fields: {fields}", details=details) from exc
        missing = {item["field"] for item in details if item["type"] in _MISSING_ERROR_TYPES}
        if missing:
            # 重置请求缺邮箱时与查询请求报同一错误。
            message = MISSING_FIELD_MESSAGES["forgot" if tag == "forgot_reset" and "email" in missing else tag]
            raise ValidationError(message, details=details) from exc
        raise ValidationError("Invalid request", details=details) from exc


class SafeUser(BaseSchema):
    """对外展示的用户信息，不含任何摘要字段。"""

    id: str
    name: str
    email: str
    phone: str | None = None
    gender: str | None = None
