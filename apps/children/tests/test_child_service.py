from uuid import uuid4

import pytest

from apps.children.services import ChildData, ChildService
from shared.domain.exceptions import ForbiddenError, NotFoundError, ValidationError

pytestmark = pytest.mark.django_db


@pytest.fixture
def service():
    return ChildService()


def test_owner_registers_own_child(service, owner_context, owner):
    child = service.create(ChildData(owner_id=owner.id, name="Mia", size="toddler"), owner_context)

    assert child.owner_id == owner.id
    assert child.size == "toddler"
    assert child.booking_ids == []


def test_owner_cannot_register_for_someone_else(service, owner_context):
    with pytest.raises(ForbiddenError):
        service.create(ChildData(owner_id="owner-2", name="Mia"), owner_context)


def test_update_keeps_owner_for_child_owners(service, child, owner_context, owner):
    updated = service.update(child.id, ChildData(owner_id="owner-9", name="Ana Maria"), owner_context)

    assert updated.name == "Ana Maria"
    assert updated.owner_id == owner.id


def test_update_does_not_touch_booking_ids(service, book, child, employee_context):
    booking = book()

    updated = service.update(child.id, ChildData(owner_id=child.owner_id, name="Ana"), employee_context)

    assert updated.booking_ids == [str(booking.id)]


def test_other_owner_cannot_read(service, child, context_for, other_owner):
    with pytest.raises(ForbiddenError):
        service.find_by_id(child.id, context_for(other_owner))


def test_destroy_batch_is_all_or_nothing(service, child, employee_context):
    with pytest.raises(NotFoundError):
        service.destroy_all([child.id, uuid4()], employee_context)

    assert service.find_by_id(child.id, employee_context).name == "Ana"


def test_destroy(service, child, employee_context):
    service.destroy_all([child.id], employee_context)

    with pytest.raises(NotFoundError):
        service.find_by_id(child.id, employee_context)


def test_import_hash_rules(service, employee_context):
    data = ChildData(owner_id="owner-1", name="Noa")

    assert service.import_(data, "child-row-1", employee_context).import_hash == "child-row-1"

    with pytest.raises(ValidationError) as existent:
        service.import_(data, "child-row-1", employee_context)
    assert existent.value.code == "importHashExistent"

    with pytest.raises(ValidationError) as required:
        service.import_(data, "", employee_context)
    assert required.value.code == "importHashRequired"


def test_owner_of_a_child_with_bookings_is_fixed(service, book, child, employee_context, update_command):
    from apps.bookings.application.command_handlers import UpdateBookingHandler
    from apps.bookings.domain.entities import BookingStatus

    booking = book()
    started = UpdateBookingHandler().handle(update_command(booking, status=BookingStatus.PROGRESS), employee_context)

    with pytest.raises(ForbiddenError):
        service.update(child.id, ChildData(owner_id="owner-9", name="Ana"), employee_context)

    assert service.find_by_id(child.id, employee_context).owner_id == "owner-1"
    completed = UpdateBookingHandler().handle(update_command(started, status=BookingStatus.COMPLETED), employee_context)
    assert completed.status == BookingStatus.COMPLETED


def test_owner_of_a_child_without_bookings_can_change(service, child, employee_context):
    updated = service.update(child.id, ChildData(owner_id="owner-9", name="Ana"), employee_context)

    assert updated.owner_id == "owner-9"


def test_update_leaves_the_payload_untouched(service, child, owner_context):
    data = ChildData(owner_id="owner-9", name="Ana")

    service.update(child.id, data, owner_context)

    assert data.owner_id == "owner-9"
