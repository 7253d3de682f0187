"""用户凭据存储。

以规范化邮箱为键，提供存在性检查、插入、条件更新与删除。
"""

from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from switchhub_api.models.switch import Switch
from switchhub_api.models.user import User


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> User | None:
        return self.db.execute(select(User).where(User.email == email)).scalar_one_or_none()

    def exists(self, email: str) -> bool:
        return self.db.execute(select(User.id).where(User.email == email)).first() is not None

    def insert(self, user: User) -> User:
        """插入新用户并提交；邮箱重复时由唯一约束抛出 IntegrityError。"""
        self.db.add(user)
        self.db.commit()
        return user

    def replace_credentials(
        self,
        user_id: UUID,
        *,
        expected_recovery_code_digest: str,
        salt: str,
        password_digest: str,
        recovery_code_digest: str,
    ) -> bool:
        """仅当找回码摘要未变时原子替换盐与两份摘要，返回是否命中。"""
        result = self.db.execute(
            update(User)
            .where(User.id == user_id)
            .where(User.recovery_code_digest == expected_recovery_code_digest)
            .values(
                salt=salt,
                password_digest=password_digest,
                recovery_code_digest=recovery_code_digest,
            )
            .execution_options(synchronize_session=False)
        )
        self.db.commit()
        return result.rowcount == 1

    def delete_by_email(self, email: str) -> bool:
        """删除用户及其开关，返回是否存在该用户。"""
        user_id = self.db.execute(select(User.id).where(User.email == email)).scalar_one_or_none()
        if user_id is None:
            return False
        self.db.execute(delete(Switch).where(Switch.user_id == user_id))
        result = self.db.execute(delete(User).where(User.id == user_id))
        self.db.commit()
        return result.rowcount > 0

    def rollback(self) -> None:
        self.db.rollback()
