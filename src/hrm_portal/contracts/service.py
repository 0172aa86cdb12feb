from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..common.pagination import Page, PageQuery
from ..common.validators import require_max_length
from ..core.enums import ContractStatus, ContractType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..devices.repository import DeviceRepository
from ..users.model import User
from ..users.repository import UserRepository
from .model import Contract
from .repository import ContractRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewContract:
    device_id: int
    user_id: int
    type: ContractType
    note: str = ""


class ContractService:
    """Use cases: device assignment/recovery contracts and their lifecycle.

    PENDING -> CONFIRMED or REJECTED is decided by the user named on the
    contract; CONFIRMED -> COMPLETED is closed by an admin.
    """

    def __init__(self, contracts: ContractRepository, devices: DeviceRepository, users: UserRepository):
        self._contracts = contracts
        self._devices = devices
        self._users = users

    def _require_contract(self, contract_id: int) -> Contract:
        contract = self._contracts.get_by_id(int(contract_id))
        if not contract:
            raise NotFoundError("Contract not found")
        return contract

    def _check_refs(self, device_id: int, user_id: int) -> None:
        if not self._devices.get_by_id(int(device_id)):
            raise NotFoundError("Device not found")
        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError("User not found")

    def create(self, data: NewContract) -> Contract:
        self._check_refs(data.device_id, data.user_id)
        note = require_max_length((data.note or "").strip(), "note", 1000)
        if data.type == ContractType.ASSIGNMENT and self._contracts.has_open_assignment(data.device_id):
            raise ValidationError("Device is already assigned or pending assignment")

        contract_id = self._contracts.create_contract(
            device_id=data.device_id,
            user_id=data.user_id,
            type=data.type,
            note=note,
        )
        logger.info("Created %s contract %s for device %s", data.type.value, contract_id, data.device_id)
        return self._require_contract(contract_id)

    def update(
        self,
        contract_id: int,
        *,
        device_id: Optional[int] = None,
        user_id: Optional[int] = None,
        type: Optional[ContractType] = None,
        note: Optional[str] = None,
    ) -> Contract:
        contract = self._require_contract(contract_id)
        new_device = device_id if device_id is not None else contract.device_id
        new_user = user_id if user_id is not None else contract.user_id
        new_type = type or contract.type
        self._check_refs(new_device, new_user)

        if (
            new_type == ContractType.ASSIGNMENT
            and contract.status in {ContractStatus.PENDING, ContractStatus.CONFIRMED}
            and self._contracts.has_open_assignment(new_device, exclude_id=contract.contract_id)
        ):
            raise ValidationError("Device is already assigned or pending assignment")

        fields: dict = {"device_id": new_device, "user_id": new_user, "type": new_type}
        if note is not None:
            fields["note"] = require_max_length(note.strip(), "note", 1000)
        self._contracts.update_fields(contract.contract_id, fields)
        return self._require_contract(contract.contract_id)

    def delete(self, contract_id: int) -> None:
        contract = self._require_contract(contract_id)
        self._contracts.delete_by_id(contract.contract_id)
        logger.info("Deleted contract %s", contract.contract_id)

    def get(self, contract_id: int) -> Contract:
        return self._require_contract(contract_id)

    def list(
        self,
        query: PageQuery,
        *,
        type: Optional[ContractType] = None,
        status: Optional[ContractStatus] = None,
    ) -> Page[Contract]:
        items, total = self._contracts.search(query, type=type, status=status)
        return Page(items=items, total=total, query=query)

    def list_mine(self, user: User, query: PageQuery, *, status: Optional[ContractStatus] = None) -> Page[Contract]:
        items, total = self._contracts.search(query, status=status, user_id=user.user_id)
        return Page(items=items, total=total, query=query)

    def _move(self, contract: Contract, source: ContractStatus, target: ContractStatus, actor: User) -> Contract:
        if contract.status != source:
            raise ValidationError(f"Contract must be {source.value} to become {target.value}")
        if not self._contracts.transition(contract.contract_id, from_status=source, to_status=target):
            raise ValidationError(f"Contract must be {source.value} to become {target.value}")
        logger.info("Contract %s %s -> %s by user %s", contract.contract_id, source.value, target.value, actor.user_id)
        return self._require_contract(contract.contract_id)

    def _require_owned(self, user: User, contract_id: int) -> Contract:
        contract = self._require_contract(contract_id)
        if contract.user_id != user.user_id:
            raise AuthorizationError("This contract does not belong to you")
        return contract

    def confirm(self, user: User, contract_id: int) -> Contract:
        contract = self._require_owned(user, contract_id)
        return self._move(contract, ContractStatus.PENDING, ContractStatus.CONFIRMED, user)

    def reject(self, user: User, contract_id: int) -> Contract:
        contract = self._require_owned(user, contract_id)
        return self._move(contract, ContractStatus.PENDING, ContractStatus.REJECTED, user)

    def complete(self, actor: User, contract_id: int) -> Contract:
        contract = self._require_contract(contract_id)
        return self._move(contract, ContractStatus.CONFIRMED, ContractStatus.COMPLETED, actor)
