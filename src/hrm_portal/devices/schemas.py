from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..api.payload import ApiModel


class DeviceIn(ApiModel):
    code: str = Field(min_length=2, max_length=50)
    type_code: str = Field(min_length=2, max_length=50)
    description: str = Field(min_length=1, max_length=500)
    note: str = Field(default="", max_length=1000)


class DeviceListQuery(ApiModel):
    type_code: Optional[str] = None
    unassigned_only: bool = False


class DeviceOut(ApiModel):
    id: int = Field(validation_alias="device_id")
    code: str
    type_code: str
    description: str
    note: str = ""
    created_at: Optional[datetime] = None


class DeviceTypeCreateIn(ApiModel):
    name: str = Field(min_length=1, max_length=100)
    code: str = Field(min_length=2, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)


class DeviceTypeUpdateIn(ApiModel):
    name: Optional[str] = Field(default=None, max_length=100)
    code: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None


class DeviceTypeOut(ApiModel):
    id: int = Field(validation_alias="device_type_id")
    name: str
    code: str
    description: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None
