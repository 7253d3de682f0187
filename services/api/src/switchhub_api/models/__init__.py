"""ORM 模型导出集合。"""

from switchhub_api.models.base import Base
from switchhub_api.models.switch import Switch
from switchhub_api.models.user import User

__all__ = [
    "Base",
    "Switch",
    "User",
]
