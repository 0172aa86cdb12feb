from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..common.pagination import Page, PageQuery
from ..common.validators import normalize_code, require_max_length, require_non_empty
from ..contracts.repository import ContractRepository
from ..core.exceptions import NotFoundError, ValidationError
from .model import Device, DeviceType
from .repository import DeviceRepository, DeviceTypeRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeviceData:
    code: str
    type_code: str
    description: str
    note: str = ""


def _clean_device(data: DeviceData) -> DeviceData:
    description = require_max_length(require_non_empty(data.description, "description"), "description", 500)
    return DeviceData(
        code=normalize_code(data.code, "code"),
        type_code=normalize_code(data.type_code, "typeCode"),
        description=description,
        note=require_max_length((data.note or "").strip(), "note", 1000),
    )


class DeviceService:
    def __init__(self, devices: DeviceRepository, contracts: ContractRepository):
        self._devices = devices
        self._contracts = contracts

    def _require_device(self, device_id: int) -> Device:
        device = self._devices.get_by_id(int(device_id))
        if not device:
            raise NotFoundError("Device not found")
        return device

    def _ensure_unique(self, data: DeviceData, *, exclude_id: Optional[int] = None) -> None:
        if self._devices.find_by_code(data.code, data.type_code, exclude_id=exclude_id):
            raise ValidationError("Device with this code and type already exists")

    def create(self, data: DeviceData) -> Device:
        data = _clean_device(data)
        self._ensure_unique(data)
        device_id = self._devices.create_device(
            code=data.code,
            type_code=data.type_code,
            description=data.description,
            note=data.note,
        )
        logger.info("Created device %s (%s/%s)", device_id, data.type_code, data.code)
        return self._require_device(device_id)

    def update(self, device_id: int, data: DeviceData) -> Device:
        device = self._require_device(device_id)
        data = _clean_device(data)
        self._ensure_unique(data, exclude_id=device.device_id)
        self._devices.update_device(
            device.device_id,
            code=data.code,
            type_code=data.type_code,
            description=data.description,
            note=data.note,
        )
        return self._require_device(device.device_id)

    def delete(self, device_id: int) -> None:
        device = self._require_device(device_id)
        if self._contracts.count_for_device(device.device_id):
            raise ValidationError("Cannot delete a device that is referenced by contracts")
        self._devices.delete_by_id(device.device_id)
        logger.info("Deleted device %s", device.device_id)

    def get(self, device_id: int) -> Device:
        return self._require_device(device_id)

    def list_simple(self, *, unassigned_only: bool = False) -> Sequence[Device]:
        return self._devices.list_simple(unassigned_only=unassigned_only)

    def search(self, query: PageQuery, *, type_code: Optional[str] = None) -> Page[Device]:
        items, total = self._devices.search(query, type_code=type_code)
        return Page(items=items, total=total, query=query)

    def held_by(self, user_id: int) -> Sequence[Device]:
        return self._devices.list_held_by(int(user_id))


class DeviceTypeService:
    def __init__(self, device_types: DeviceTypeRepository):
        self._types = device_types

    def _require_type(self, device_type_id: int) -> DeviceType:
        device_type = self._types.get_by_id(int(device_type_id))
        if not device_type:
            raise NotFoundError("Device type not found")
        return device_type

    def _ensure_unique(self, name: str, code: str, *, exclude_id: Optional[int] = None) -> None:
        conflict = self._types.find_conflict(name=name, code=code, exclude_id=exclude_id)
        if conflict:
            field = "name" if conflict.name == name else "code"
            raise ValidationError(f"Device type {field} already exists")

    def list_active(self) -> Sequence[DeviceType]:
        return self._types.list_active()

    def search(self, query: PageQuery) -> Page[DeviceType]:
        items, total = self._types.search(query)
        return Page(items=items, total=total, query=query)

    def create(self, *, name: str, code: str, description: Optional[str] = None) -> DeviceType:
        name = require_max_length(require_non_empty(name, "name"), "name", 100)
        code = normalize_code(code, "code")
        description = require_max_length((description or "").strip(), "description", 500) or None
        self._ensure_unique(name, code)
        type_id = self._types.create_device_type(name=name, code=code, description=description)
        logger.info("Created device type %s (%s)", type_id, code)
        return self._require_type(type_id)

    def update(
        self,
        device_type_id: int,
        *,
        name: Optional[str] = None,
        code: Optional[str] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> DeviceType:
        current = self._require_type(device_type_id)
        fields: dict = {}
        if name is not None:
            fields["name"] = require_max_length(require_non_empty(name, "name"), "name", 100)
        if code is not None:
            fields["code"] = normalize_code(code, "code")
        if description is not None:
            fields["description"] = require_max_length(description.strip(), "description", 500) or None
        if is_active is not None:
            fields["is_active"] = bool(is_active)

        self._ensure_unique(
            fields.get("name", current.name),
            fields.get("code", current.code),
            exclude_id=current.device_type_id,
        )
        self._types.update_device_type(current.device_type_id, fields)
        return self._require_type(current.device_type_id)

    def delete(self, device_type_id: int) -> None:
        current = self._require_type(device_type_id)
        self._types.delete_by_id(current.device_type_id)
        logger.info("Deleted device type %s", current.device_type_id)
