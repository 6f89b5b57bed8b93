from __future__ import annotations

from datetime import datetime

import pytest

from concrete_ops.core.enums import AssignmentStatus, EquipmentStatus, EquipmentType
from concrete_ops.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from concrete_ops.equipment.service import EquipmentService

from conftest import InMemoryEquipment

NOW = datetime(2026, 3, 10, 7, 0, 0)


@pytest.fixture
def repo(users):
    return InMemoryEquipment(users)


@pytest.fixture
def service(repo, users):
    return EquipmentService(repo, users)


def test_create_generates_qr_code(service):
    item = service.create_equipment(body={"name": "Hilti DD-250", "equipment_type": "tool", "serial_number": "SN-1"})

    assert item.qr_code.startswith("EQ-") and len(item.qr_code) == 11
    assert item.status == EquipmentStatus.AVAILABLE
    assert item.equipment_type == EquipmentType.TOOL


def test_create_validation(service):
    with pytest.raises(ValidationError, match="Name is required"):
        service.create_equipment(body={"equipment_type": "tool"})
    with pytest.raises(ValidationError, match="Invalid equipment type"):
        service.create_equipment(body={"name": "Saw", "equipment_type": "spaceship"})

    service.create_equipment(body={"name": "Saw", "serial_number": "SN-9"})
    with pytest.raises(ConflictError):
        service.create_equipment(body={"name": "Other saw", "serial_number": "SN-9"})


def test_qr_png_is_an_image(service):
    item = service.create_equipment(body={"name": "Blade 14in", "equipment_type": "blade"})
    assert service.qr_png(item.equipment_id).startswith(b"\x89PNG")


def test_scan_reports_holder_and_logs(service, repo, manager, operator):
    item = repo.add()
    service.checkout(manager, equipment_id=item.equipment_id, operator_id=operator.user_id, now=NOW)

    result = service.scan(operator, code=item.qr_code)

    assert result.holder.user_id == operator.user_id
    assert result.equipment.assigned_to_name == operator.full_name
    assert (item.equipment_id, operator.user_id, "scan") in repo.scans
    with pytest.raises(NotFoundError):
        service.scan(operator, code="EQ-NOPE")


def test_checkout_and_return(service, repo, manager, operator):
    item = repo.add()

    assignment = service.checkout(
        manager, equipment_id=str(item.equipment_id), operator_id=operator.user_id, notes="for J-100", now=NOW
    )
    assert assignment.operator_name == operator.full_name
    checked_out = service.get_equipment(item.equipment_id)
    assert checked_out.status == EquipmentStatus.ASSIGNED
    assert checked_out.assigned_to == operator.user_id

    with pytest.raises(ConflictError, match="already checked out"):
        service.checkout(manager, equipment_id=item.equipment_id, operator_id=operator.user_id)

    returned = service.return_equipment(operator, equipment_id=item.equipment_id, now=NOW)
    assert returned.status == EquipmentStatus.AVAILABLE
    assert returned.assigned_to is None
    assert repo.assignments[assignment.assignment_id].status == AssignmentStatus.RETURNED


def test_checkout_requires_ids(service, manager):
    with pytest.raises(ValidationError, match="Equipment ID and Operator ID are required"):
        service.checkout(manager, equipment_id=None, operator_id=2)


def test_operators_only_return_their_own_equipment(service, repo, manager, operator, other_operator):
    item = repo.add()
    service.checkout(manager, equipment_id=item.equipment_id, operator_id=operator.user_id, now=NOW)

    with pytest.raises(AuthorizationError):
        service.return_equipment(other_operator, equipment_id=item.equipment_id)
    with pytest.raises(AuthorizationError):
        service.operator_equipment(other_operator, operator_id=operator.user_id)
    assert [e.equipment_id for e in service.operator_equipment(manager, operator_id=operator.user_id)] == [
        item.equipment_id
    ]


def test_returning_available_equipment_is_rejected(service, repo, manager):
    item = repo.add()
    with pytest.raises(ValidationError, match="not checked out"):
        service.return_equipment(manager, equipment_id=item.equipment_id)
