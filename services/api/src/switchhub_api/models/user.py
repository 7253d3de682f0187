"""用户凭据模型。"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from switchhub_api.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """本地账号，邮箱为唯一自然键。"""

    __tablename__ = "users"

    # 规范化（去空格 + 小写）后的邮箱，唯一约束保证并发注册只有一条成功。
    email: Mapped[str] = mapped_column(String(256), nullable=False, unique=True)
    # 展示名。
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    # 用户级随机盐，口令摘要与找回码摘要共用，重置成功后轮换。
    salt: Mapped[str] = mapped_column(String(64), nullable=False)
    # sha256(password + salt)，不存明文。
    password_digest: Mapped[str] = mapped_column(String(64), nullable=False)
    # sha256(recovery_code + salt)，每次重置成功后替换。
    recovery_code_digest: Mapped[str] = mapped_column(String(64), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32))
    gender: Mapped[str | None] = mapped_column(String(32))
