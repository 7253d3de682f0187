"""应用运行配置。"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """接口服务共享配置。"""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="SH_", extra="ignore")

    app_name: str = Field(default="SwitchHub API", description="应用名称。")
    app_env: str = Field(default="dev", description="运行环境标识。")
    app_debug: bool = Field(default=False, description="是否开启调试模式。")
    api_prefix: str = Field(default="/api", description="统一接口前缀。")
    log_level: str = Field(default="INFO", description="日志级别。")
    database_url: str = Field(
        default="sqlite+pysqlite:///./switchhub.db",
        description="数据库连接地址。",
    )
    auto_create_schema: bool = Field(default=True, description="启动时是否自动建表。")

    auth_jwt_secret: str = Field(min_length=16, description="会话令牌 HMAC 签名密钥，必须由部署环境提供。")
    auth_token_ttl_seconds: int = Field(default=86400, description="会话令牌有效期（秒）。")
    auth_recovery_code_length: int = Field(default=12, description="找回码长度。")
    auth_password_min_length: int = Field(default=8, description="注册与重置时的最短密码长度。")

    switch_limit_per_user: int = Field(default=5, description="每个用户可创建的开关数量上限。")

    cors_allow_origin: str = Field(default="*", description="跨域允许来源。")
    cors_allow_headers: str = Field(default="Content-Type, Authorization", description="跨域允许请求头。")
    cors_allow_methods: str = Field(default="GET, POST, OPTIONS", description="跨域允许方法。")

    @field_validator("auth_token_ttl_seconds", "auth_recovery_code_length", "switch_limit_per_user")
    @classmethod
    def ensure_positive(cls, value: int) -> int:
        """数量类配置必须为正数。"""
        if value <= 0:
            raise ValueError("value must be positive")
        return value

    @property
    def cors_headers(self) -> dict[str, str]:
        """返回所有响应统一附带的跨域头。"""
        return {
            "Access-Control-Allow-Origin": self.cors_allow_origin,
            "Access-Control-Allow-Headers": self.cors_allow_headers,
            "Access-Control-Allow-Methods": self.cors_allow_methods,
        }


@lru_cache
def get_settings() -> Settings:
    """返回缓存后的配置单例。"""
    return Settings()
