from decimal import Decimal
from uuid import uuid4

import pytest

from apps.bookings.application.command_handlers import (
    CreateBookingCommand,
    DestroyBookingsCommand,
    DestroyBookingsHandler,
    ImportBookingCommand,
    ImportBookingHandler,
    UpdateBookingHandler,
)
from apps.bookings.application.queries import BookingQueries
from apps.bookings.domain.capacity import count_active_overlapping
from apps.bookings.domain.entities import BookingStatus, Photo
from apps.bookings.repositories import BookingRepository
from apps.children.repositories import child_repository
from apps.children.services import ChildData, ChildService
from apps.configuration.services import SettingsService
from shared.domain.exceptions import (
    ForbiddenError,
    InvalidPeriod,
    NotFoundError,
    PastPeriod,
    PeriodFull,
    ValidationError,
)

pytestmark = pytest.mark.django_db


def booking_ids_of(child):
    return child_repository().find_by_id(child.id).booking_ids


@pytest.fixture
def second_child(db, employee_context, owner):
    return ChildService().create(ChildData(owner_id=owner.id, name="Leo", type="boy"), employee_context)


# ----- create -----

def test_create_prices_and_links_the_booking(book, child):
    booking = book()

    assert booking.status == BookingStatus.BOOKED
    assert booking.fee == Decimal("50.00")
    assert booking.child.name == "Ana"
    assert booking_ids_of(child) == [str(booking.id)]


def test_capacity_is_enforced_and_freed_by_cancelling(book, at, update_command, employee_context):
    first = book(at(1), at(5, hour=18))
    book(at(2), at(6, hour=18))

    with pytest.raises(PeriodFull):
        book(at(3), at(4, hour=18))

    UpdateBookingHandler().handle(update_command(first, status=BookingStatus.CANCELLED), employee_context)

    assert book(at(3), at(4, hour=18)).status == BookingStatus.BOOKED


def test_non_overlapping_stays_do_not_compete(book, at):
    book(at(1), at(5, hour=18))
    book(at(1), at(5, hour=18))

    assert book(at(6), at(8)).fee == Decimal("30.00")


def test_fee_follows_current_settings(book, employee, at):
    SettingsService.save(employee, daily_fee=Decimal("12.50"))

    assert book(at(1), at(2)).fee == Decimal("25.00")


def test_rejects_inverted_period(book, at):
    with pytest.raises(InvalidPeriod):
        book(at(5), at(1))


def test_rejects_past_period(book, at):
    with pytest.raises(PastPeriod):
        book(at(30, month=11, year=2030), at(2))


def test_employee_records_a_past_stay_as_completed(book, at):
    booking = book(at(1, month=11, year=2030), at(3, month=11, year=2030), status=BookingStatus.COMPLETED)

    assert booking.status == BookingStatus.COMPLETED
    assert booking.fee == Decimal("30.00")


def test_owner_books_own_child(book, owner_context, owner):
    assert book(context=owner_context).owner_id == owner.id


def test_owner_cannot_book_child_of_someone_else(book, context_for, other_owner):
    with pytest.raises(ForbiddenError):
        book(context=context_for(other_owner), owner_id=other_owner.id)


def test_child_must_belong_to_booking_owner(book):
    with pytest.raises(ForbiddenError):
        book(owner_id="owner-2")


def test_unknown_child(book):
    with pytest.raises(NotFoundError):
        book(child_id=uuid4())


# ----- update -----

def test_owner_edits_notes_and_cannot_change_owner(book, update_command, owner_context, owner):
    booking = book()

    updated = UpdateBookingHandler().handle(
        update_command(booking, owner_notes="allergic to nuts", owner_id="owner-9"),
        owner_context,
    )

    assert updated.owner_notes == "allergic to nuts"
    assert updated.owner_id == owner.id


def test_owner_update_leaves_the_command_untouched(book, update_command, owner_context, owner):
    command = update_command(book(), owner_id="owner-9")

    updated = UpdateBookingHandler().handle(command, owner_context)

    assert updated.owner_id == owner.id
    assert command.owner_id == "owner-9"


def test_owner_cannot_reopen_progress(book, update_command, employee_context, owner_context):
    booking = book()
    started = UpdateBookingHandler().handle(update_command(booking, status=BookingStatus.PROGRESS), employee_context)

    with pytest.raises(ForbiddenError):
        UpdateBookingHandler().handle(update_command(started, status=BookingStatus.BOOKED), owner_context)


def test_other_owner_cannot_update(book, update_command, context_for, other_owner):
    booking = book()

    with pytest.raises(ForbiddenError):
        UpdateBookingHandler().handle(update_command(booking, owner_notes="mine"), context_for(other_owner))


def test_update_reprices(book, at, update_command, employee_context):
    booking = book()

    updated = UpdateBookingHandler().handle(update_command(booking, departure=at(2)), employee_context)

    assert updated.fee == Decimal("20.00")


def test_update_does_not_compete_with_itself(book, at, update_command, employee_context):
    booking = book(at(1), at(5, hour=18))
    book(at(1), at(5, hour=18))

    updated = UpdateBookingHandler().handle(update_command(booking, arrival=at(2)), employee_context)

    assert updated.arrival == at(2)


def test_moving_to_another_child_moves_the_back_reference(book, child, second_child, update_command, employee_context):
    booking = book()

    UpdateBookingHandler().handle(update_command(booking, child_id=second_child.id), employee_context)

    assert booking_ids_of(child) == []
    assert booking_ids_of(second_child) == [str(booking.id)]


def test_terminal_booking_is_frozen(book, update_command, employee_context):
    booking = book()
    cancelled = UpdateBookingHandler().handle(update_command(booking, status=BookingStatus.CANCELLED), employee_context)

    with pytest.raises(ForbiddenError):
        UpdateBookingHandler().handle(update_command(cancelled, owner_notes="again"), employee_context)


def test_update_missing_booking(book, update_command, employee_context):
    booking = book()
    booking.id = uuid4()

    with pytest.raises(NotFoundError):
        UpdateBookingHandler().handle(update_command(booking), employee_context)


# ----- progress notifications -----

def test_new_employee_notes_notify_once(
    book, update_command, employee_context, sent_notifications, django_capture_on_commit_callbacks
):
    booking = book()

    with django_capture_on_commit_callbacks(execute=True):
        UpdateBookingHandler().handle(
            update_command(booking, status=BookingStatus.PROGRESS, employee_notes="had a nap"),
            employee_context,
        )

    assert len(sent_notifications) == 1
    language, notified = sent_notifications[0]
    assert language == "en"
    assert notified.id == booking.id
    assert notified.employee_notes == "had a nap"


def test_unrelated_edit_does_not_notify(
    book, update_command, employee_context, sent_notifications, django_capture_on_commit_callbacks
):
    booking = book(status=BookingStatus.PROGRESS, employee_notes="had a nap")

    with django_capture_on_commit_callbacks(execute=True):
        UpdateBookingHandler().handle(update_command(booking, owner_notes="pick up at 5"), employee_context)

    assert sent_notifications == []


def test_new_photo_notifies_in_request_language(
    book, update_command, context_for, employee, sent_notifications, django_capture_on_commit_callbacks
):
    booking = book(status=BookingStatus.PROGRESS, photos=[Photo(id="p1", url="https://cdn/p1.jpg")])

    with django_capture_on_commit_callbacks(execute=True):
        UpdateBookingHandler().handle(
            update_command(booking, photos=booking.photos + [Photo(id="p2", url="https://cdn/p2.jpg")]),
            context_for(employee, "pt-br"),
        )

    assert [language for language, _ in sent_notifications] == ["pt-br"]


def test_failed_notification_keeps_the_update(
    book, update_command, employee_context, failing_sender, django_capture_on_commit_callbacks
):
    booking = book()

    with django_capture_on_commit_callbacks(execute=True):
        updated = UpdateBookingHandler().handle(
            update_command(booking, status=BookingStatus.PROGRESS, employee_notes="had a nap"),
            employee_context,
        )

    assert BookingRepository().find_by_id(updated.id).employee_notes == "had a nap"


def test_rejected_update_does_not_notify(
    book, update_command, owner_context, sent_notifications, django_capture_on_commit_callbacks
):
    booking = book()

    with django_capture_on_commit_callbacks(execute=True):
        with pytest.raises(ForbiddenError):
            UpdateBookingHandler().handle(
                update_command(booking, status=BookingStatus.PROGRESS, employee_notes="sneaky"),
                owner_context,
            )

    assert sent_notifications == []


# ----- destroy -----

def test_destroy_removes_booking_and_back_reference(book, child, employee_context):
    booking = book()

    DestroyBookingsHandler().handle(DestroyBookingsCommand([booking.id]), employee_context)

    assert booking_ids_of(child) == []
    with pytest.raises(NotFoundError):
        BookingRepository().find_by_id(booking.id)


def test_destroy_batch_is_all_or_nothing(book, at, child, employee_context):
    first = book(at(1), at(2))
    second = book(at(3), at(4))

    with pytest.raises(NotFoundError):
        DestroyBookingsHandler().handle(DestroyBookingsCommand([first.id, uuid4(), second.id]), employee_context)

    assert BookingRepository().find_by_id(first.id).id == first.id
    assert sorted(booking_ids_of(child)) == sorted([str(first.id), str(second.id)])


def test_owner_cannot_destroy_someone_elses_booking(book, context_for, other_owner):
    booking = book()

    with pytest.raises(ForbiddenError):
        DestroyBookingsHandler().handle(DestroyBookingsCommand([booking.id]), context_for(other_owner))


def test_child_with_bookings_cannot_be_destroyed(book, child, employee_context):
    booking = book()

    with pytest.raises(ValidationError) as error:
        ChildService().destroy_all([child.id], employee_context)
    assert error.value.code == "bookingExists"

    DestroyBookingsHandler().handle(DestroyBookingsCommand([booking.id]), employee_context)
    ChildService().destroy_all([child.id], employee_context)


# ----- import -----

def test_import_uses_each_hash_once(daycare_settings, child, at, employee_context):
    command = CreateBookingCommand(
        child_id=child.id, owner_id=child.owner_id, arrival=at(1), departure=at(2)
    )

    booking = ImportBookingHandler().handle(ImportBookingCommand(command, "row-1"), employee_context)
    assert booking.import_hash == "row-1"

    with pytest.raises(ValidationError) as error:
        ImportBookingHandler().handle(ImportBookingCommand(command, "row-1"), employee_context)
    assert error.value.code == "importHashExistent"


def test_import_requires_a_hash(daycare_settings, child, at, employee_context):
    command = CreateBookingCommand(
        child_id=child.id, owner_id=child.owner_id, arrival=at(1), departure=at(2)
    )

    with pytest.raises(ValidationError) as error:
        ImportBookingHandler().handle(ImportBookingCommand(command, None), employee_context)
    assert error.value.code == "importHashRequired"


# ----- queries -----

def test_owner_reads_only_own_bookings(book, owner_context, context_for, other_owner):
    booking = book()
    queries = BookingQueries()

    assert queries.find_by_id(booking.id, owner_context).child.name == "Ana"
    with pytest.raises(ForbiddenError):
        queries.find_by_id(booking.id, context_for(other_owner))


def test_period_availability(book, at, employee_context):
    first = book(at(1), at(5, hour=18))
    book(at(2), at(6, hour=18))
    queries = BookingQueries()

    assert not queries.is_period_available(at(3), at(4), None, employee_context)
    assert queries.is_period_available(at(3), at(4), first.id, employee_context)
    assert queries.is_period_available(at(7), at(9), None, employee_context)


def test_fee_quote(daycare_settings, at, employee_context):
    assert BookingQueries().calculate_fee(at(1), at(3, hour=8), employee_context) == Decimal("30.00")


def test_stored_count_matches_in_memory_count(book, at, update_command, employee_context):
    book(at(1), at(3))
    cancelled = book(at(2), at(4))
    book(at(4), at(6))
    UpdateBookingHandler().handle(update_command(cancelled, status=BookingStatus.CANCELLED), employee_context)
    documents = BookingRepository().documents
    queries = BookingQueries()

    for start, end in [(at(1), at(1)), (at(3), at(4)), (at(4, hour=12), at(5)), (at(7), at(8))]:
        assert queries.count_active_overlapping(start, end) == count_active_overlapping(
            documents.query_by_range("departure", lo=start), start, end
        )
