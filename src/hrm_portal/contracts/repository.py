from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..common.pagination import PageQuery
from ..core.enums import ContractStatus, ContractType
from .model import Contract


class ContractRepository(Protocol):
    def get_by_id(self, contract_id: int) -> Optional[Contract]:
        raise NotImplementedError

    def create_contract(
        self,
        *,
        device_id: int,
        user_id: int,
        type: ContractType,
        note: str,
    ) -> int:
        raise NotImplementedError

    def update_fields(self, contract_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def delete_by_id(self, contract_id: int) -> bool:
        raise NotImplementedError

    def search(
        self,
        query: PageQuery,
        *,
        type: Optional[ContractType] = None,
        status: Optional[ContractStatus] = None,
        user_id: Optional[int] = None,
    ) -> tuple[Sequence[Contract], int]:
        raise NotImplementedError

    def has_open_assignment(self, device_id: int, *, exclude_id: Optional[int] = None) -> bool:
        """True while the device has a PENDING or CONFIRMED assignment contract."""
        raise NotImplementedError

    def count_for_device(self, device_id: int) -> int:
        raise NotImplementedError

    def transition(self, contract_id: int, *, from_status: ContractStatus, to_status: ContractStatus) -> bool:
        """Move to ``to_status`` only if the contract is still in ``from_status``."""
        raise NotImplementedError
