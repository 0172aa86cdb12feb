from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ContractStatus, ContractType


@dataclass(frozen=True)
class Contract:
    """Domain entity: handing a device to a user, or taking it back."""

    contract_id: int
    device_id: int
    user_id: int
    type: ContractType
    status: ContractStatus = ContractStatus.PENDING
    note: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_open_assignment(self) -> bool:
        return self.type == ContractType.ASSIGNMENT and self.status in {
            ContractStatus.PENDING,
            ContractStatus.CONFIRMED,
        }
