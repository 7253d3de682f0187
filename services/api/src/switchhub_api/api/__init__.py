"""路由模块导出集合。"""

from . import auth, health, switches

__all__ = [
    "auth",
    "health",
    "switches",
]
