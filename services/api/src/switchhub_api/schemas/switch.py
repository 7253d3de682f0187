"""开关状态请求与响应结构。"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from switchhub_api.schemas.common import BaseSchema

Label = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=64)]
State = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=32)]


class SwitchUpsertRequest(BaseModel):
    """写入开关状态，同名开关覆盖。"""

    model_config = ConfigDict(extra="forbid")

    label: Label = Field(description="开关名称。", examples=["living-room-lamp"])
    state: State = Field(description="开关状态。", examples=["on"])


class SwitchData(BaseSchema):
    label: str
    state: str
    updated_at: datetime


class SwitchListResponse(BaseSchema):
    success: bool = True
    switches: list[SwitchData]
