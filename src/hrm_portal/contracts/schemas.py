from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from ..api.payload import ApiModel
from ..core.enums import ContractStatus, ContractType


class ContractCreateIn(ApiModel):
    device_id: int = Field(ge=1)
    user_id: int = Field(ge=1)
    type: ContractType
    note: str = Field(default="", max_length=1000)


class ContractUpdateIn(ApiModel):
    device_id: Optional[int] = Field(default=None, ge=1)
    user_id: Optional[int] = Field(default=None, ge=1)
    type: Optional[ContractType] = None
    note: Optional[str] = Field(default=None, max_length=1000)


class ContractFilterQuery(ApiModel):
    type: Optional[ContractType] = None
    status: Optional[ContractStatus] = None


class ContractOut(ApiModel):
    id: int = Field(validation_alias="contract_id")
    device_id: int
    user_id: int
    type: ContractType
    status: ContractStatus
    note: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
