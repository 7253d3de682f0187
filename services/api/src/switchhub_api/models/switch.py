"""设备开关状态模型。"""

from uuid import UUID

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from switchhub_api.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Switch(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """用户名下的一个具名开关。"""

    __tablename__ = "switches"
    __table_args__ = (UniqueConstraint("user_id", "label", name="uk_switch_user_label"),)

    # 所属用户 ID（逻辑关联 users.id，不声明数据库外键）。
    user_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    label: Mapped[str] = mapped_column(String(64), nullable=False)
    # 设备上报的状态文本，如 on/off。
    state: Mapped[str] = mapped_column(String(32), nullable=False)
