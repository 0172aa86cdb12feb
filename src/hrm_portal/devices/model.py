from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class DeviceType:
    device_type_id: int
    name: str
    code: str
    description: Optional[str] = None
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Device:
    """Domain entity: an inventory item identified by (code, type code)."""

    device_id: int
    code: str
    type_code: str
    description: str
    note: str = ""
    created_at: Optional[datetime] = None
