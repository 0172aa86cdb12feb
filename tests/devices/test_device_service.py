from __future__ import annotations

import pytest

from hrm_portal.common.pagination import PageQuery
from hrm_portal.core.enums import ContractStatus, ContractType
from hrm_portal.core.exceptions import NotFoundError, ValidationError
from hrm_portal.devices.service import DeviceData, DeviceService, DeviceTypeService


@pytest.fixture
def service(repos):
    return DeviceService(repos.devices, repos.contracts)


@pytest.fixture
def types(repos):
    return DeviceTypeService(repos.device_types)


def _laptop(code="lt-001", type_code="laptop"):
    return DeviceData(code=code, type_code=type_code, description="ThinkPad T14", note="")


def test_create_upper_cases_codes(service):
    device = service.create(_laptop(code="  lt-001 "))
    assert device.code == "LT-001"
    assert device.type_code == "LAPTOP"


def test_duplicate_code_and_type_is_rejected(service):
    service.create(_laptop())
    with pytest.raises(ValidationError):
        service.create(_laptop(code="LT-001", type_code="LAPTOP"))
    # same code under another type is fine
    assert service.create(_laptop(type_code="monitor")).type_code == "MONITOR"


def test_code_length_and_description_rules(service):
    with pytest.raises(ValidationError):
        service.create(_laptop(code="x"))
    with pytest.raises(ValidationError):
        service.create(DeviceData(code="LT-9", type_code="LAPTOP", description=" ", note=""))
    with pytest.raises(ValidationError):
        service.create(DeviceData(code="LT-9", type_code="LAPTOP", description="ok", note="n" * 1001))


def test_update_checks_uniqueness_against_others(service):
    first = service.create(_laptop(code="LT-001"))
    second = service.create(_laptop(code="LT-002"))

    with pytest.raises(ValidationError):
        service.update(second.device_id, _laptop(code="LT-001"))
    assert service.update(first.device_id, _laptop(code="lt-001")).code == "LT-001"


def test_delete_refused_while_referenced_by_contract(repos, service):
    device = service.create(_laptop())
    user = repos.users.add("alice")
    repos.contracts.create_contract(device_id=device.device_id, user_id=user.user_id, type=ContractType.ASSIGNMENT, note="")

    with pytest.raises(ValidationError):
        service.delete(device.device_id)

    other = service.create(_laptop(code="LT-002"))
    service.delete(other.device_id)
    with pytest.raises(NotFoundError):
        service.get(other.device_id)


def test_held_devices_and_unassigned_list(repos, service):
    laptop = service.create(_laptop())
    monitor = service.create(_laptop(code="MN-001", type_code="monitor"))
    alice = repos.users.add("alice")

    cid = repos.contracts.create_contract(device_id=laptop.device_id, user_id=alice.user_id, type=ContractType.ASSIGNMENT, note="")
    repos.contracts.transition(cid, from_status=ContractStatus.PENDING, to_status=ContractStatus.CONFIRMED)
    repos.contracts.transition(cid, from_status=ContractStatus.CONFIRMED, to_status=ContractStatus.COMPLETED)

    assert [d.code for d in service.held_by(alice.user_id)] == ["LT-001"]
    assert [d.code for d in service.list_simple(unassigned_only=True)] == [monitor.code]

    rid = repos.contracts.create_contract(device_id=laptop.device_id, user_id=alice.user_id, type=ContractType.RECOVERY, note="")
    repos.contracts.transition(rid, from_status=ContractStatus.PENDING, to_status=ContractStatus.CONFIRMED)
    repos.contracts.transition(rid, from_status=ContractStatus.CONFIRMED, to_status=ContractStatus.COMPLETED)

    assert service.held_by(alice.user_id) == []
    assert len(service.list_simple(unassigned_only=True)) == 2


def test_search_pages_results(service):
    for n in range(3):
        service.create(_laptop(code=f"LT-00{n}"))
    page = service.search(PageQuery(page=2, limit=2))
    assert page.total == 3
    assert len(page.items) == 1
    assert page.meta() == {"total": 3, "page": 2, "totalPages": 2, "limit": 2}


def test_device_type_name_and_code_unique(types):
    types.create(name="Laptop", code="lt")
    with pytest.raises(ValidationError):
        types.create(name="Laptop", code="nb")
    with pytest.raises(ValidationError):
        types.create(name="Notebook", code="LT")


def test_device_type_update_and_deactivate(types):
    laptop = types.create(name="Laptop", code="LT")
    monitor = types.create(name="Monitor", code="MN")

    with pytest.raises(ValidationError):
        types.update(monitor.device_type_id, code="lt")

    types.update(laptop.device_type_id, is_active=False, description="retired")
    assert [t.name for t in types.list_active()] == ["Monitor"]


def test_device_type_delete_unknown(types):
    with pytest.raises(NotFoundError):
        types.delete(7)
