"""全局通用结构。

用于在线接口文档展示统一的成功与错误响应结构。
"""

from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    """基础结构，开启对象映射能力。"""

    model_config = ConfigDict(from_attributes=True)


class ErrorDetail(BaseSchema):
    """单个字段的校验错误。"""

    field: str = Field(description="出错字段路径。")
    message: str | None = Field(default=None, description="错误说明。")
    type: str | None = Field(default=None, description="错误类型。")


class ErrorResponse(BaseSchema):
    """统一错误响应。"""

    success: bool = Field(default=False, description="恒为 false。")
    error: str = Field(description="人类可读错误信息。")
    details: list[ErrorDetail] | None = Field(default=None, description="参数校验错误明细。")


class HealthStatusResponse(BaseSchema):
    """探针结果。"""

    success: bool = Field(default=True)
    status: str = Field(description="ok 或 ready。")
