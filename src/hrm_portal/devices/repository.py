from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..common.pagination import PageQuery
from .model import Device, DeviceType


class DeviceRepository(Protocol):
    def get_by_id(self, device_id: int) -> Optional[Device]:
        raise NotImplementedError

    def find_by_code(self, code: str, type_code: str, *, exclude_id: Optional[int] = None) -> Optional[Device]:
        raise NotImplementedError

    def list_simple(self, *, unassigned_only: bool = False) -> Sequence[Device]:
        """All devices ordered by code; optionally only those nobody currently holds."""
        raise NotImplementedError

    def search(self, query: PageQuery, *, type_code: Optional[str] = None) -> tuple[Sequence[Device], int]:
        raise NotImplementedError

    def list_held_by(self, user_id: int) -> Sequence[Device]:
        """Devices handed to ``user_id`` by a completed assignment and not recovered since."""
        raise NotImplementedError

    def create_device(self, *, code: str, type_code: str, description: str, note: str) -> int:
        raise NotImplementedError

    def update_device(self, device_id: int, *, code: str, type_code: str, description: str, note: str) -> bool:
        raise NotImplementedError

    def delete_by_id(self, device_id: int) -> bool:
        raise NotImplementedError


class DeviceTypeRepository(Protocol):
    def get_by_id(self, device_type_id: int) -> Optional[DeviceType]:
        raise NotImplementedError

    def find_conflict(self, *, name: str, code: str, exclude_id: Optional[int] = None) -> Optional[DeviceType]:
        raise NotImplementedError

    def list_active(self) -> Sequence[DeviceType]:
        raise NotImplementedError

    def search(self, query: PageQuery) -> tuple[Sequence[DeviceType], int]:
        raise NotImplementedError

    def create_device_type(self, *, name: str, code: str, description: Optional[str]) -> int:
        raise NotImplementedError

    def update_device_type(self, device_type_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, device_type_id: int) -> bool:
        raise NotImplementedError
