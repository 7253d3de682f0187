"""开关状态存储。"""

from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from switchhub_api.models.switch import Switch
from switchhub_api.models.user import User


class SwitchRepository:
    def __init__(self, db: Session):
        self.db = db

    def user_exists(self, user_id: UUID) -> bool:
        return self.db.get(User, user_id) is not None

    def get(self, user_id: UUID, label: str) -> Switch | None:
        stmt = select(Switch).where(Switch.user_id == user_id).where(Switch.label == label)
        return self.db.execute(stmt).scalar_one_or_none()

    def count(self, user_id: UUID) -> int:
        return self.db.execute(select(func.count(Switch.id)).where(Switch.user_id == user_id)).scalar_one()

    def list_for_user(self, user_id: UUID) -> list[Switch]:
        stmt = select(Switch).where(Switch.user_id == user_id).order_by(Switch.created_at, Switch.label)
        return list(self.db.execute(stmt).scalars().all())

    def save(self, switch: Switch) -> Switch:
        self.db.add(switch)
        self.db.commit()
        self.db.refresh(switch)
        return switch

    def rollback(self) -> None:
        self.db.rollback()
