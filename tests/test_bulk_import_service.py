import typing as t

import pytest

from checkin.exceptions import EventNotFoundOrInactiveError, ValidationError
from checkin.models import Attendee, Event, EventRegistration, User
from checkin.repositories import AttendeeRepository, EventRegistrationRepository
from checkin.services import DoorRegistrationService, EventService, IdentityResolver
from checkin.services.bulk_import_service import (
    BulkImportService,
    ColumnMapping,
    EventSelector,
    coerce_first_time_guest,
)


def run_import(rows: list, event: Event, user: User, mapping: ColumnMapping = None):
    return BulkImportService.import_rows(rows, EventSelector(event_id=event.id), user.id, mapping)


def test_duplicate_rows_reuse_attendee_and_report_duplicate(event: Event, user: User) -> None:
    rows = [{"name": "A", "phone": "111"}, {"name": "A", "phone": "111"}]

    result = run_import(rows, event, user)

    assert result.created_or_updated_count == 1
    assert result.registered_count == 1
    assert len(result.errors) == 1
    assert "already registered" in result.errors[0]
    assert Attendee.query.count() == 1


def test_blank_name_row_is_skipped_and_others_processed(event: Event, user: User) -> None:
    rows = [
        {"name": "Amina", "phone": "0712345678"},
        {"name": "   ", "phone": "0700000000"},
        {"name": "Brian", "location": "Thika"},
    ]

    result = run_import(rows, event, user)

    assert result.registered_count == 2
    assert result.created_count == 2
    assert result.errors == ["Skipping row 2: name missing"]
    assert AttendeeRepository.find_by_phone("0700000000") is None


def test_existing_attendee_is_counted_as_updated(event: Event, user: User) -> None:
    IdentityResolver.resolve({"name": "Old Name", "phone_number": "0722222222"}, user.id)

    result = run_import([{"name": "New Name", "phone": "0722222222"}], event, user)

    assert result.created_count == 0
    assert result.updated_count == 1
    assert result.created_or_updated_count == 1
    assert AttendeeRepository.find_by_phone("0722222222").name == "New Name"


def test_rows_match_on_name_and_location_without_phone(event: Event, user: User) -> None:
    rows = [
        {"name": "Jo", "location": "Nairobi "},
        {"name": "Jo", "location": "nairobi"},
    ]

    result = run_import(rows, event, user)

    assert result.created_or_updated_count == 1
    assert result.registered_count == 1
    assert len(result.errors) == 1


def test_capacity_is_not_enforced(make_event: t.Callable[..., Event], user: User) -> None:
    event = make_event(max_capacity=1)
    rows = [{"name": f"Guest {i}", "phone": f"07000000{i}"} for i in range(3)]

    result = run_import(rows, event, user)

    assert result.registered_count == 3
    assert result.errors == []
    assert EventRegistrationRepository.count_by_event_id(event.id) == 3


def test_imported_registrations_are_attended(event: Event, user: User) -> None:
    run_import([{"name": "Amina", "phone": "0712345678", "isFirstTimeGuest": "yes"}], event, user)

    attendee = AttendeeRepository.find_by_phone("0712345678")
    registration = EventRegistrationRepository.find_by_event_and_attendee(event.id, attendee.id)
    assert registration.has_attended is True
    assert registration.attendance_time is not None
    assert registration.registration_date == "2026-10-18"
    assert registration.first_time_at_registration is True
    assert attendee.is_first_time_guest is False


def test_custom_column_mapping(event: Event, user: User) -> None:
    rows = [
        {"Full Name": " Wanjiru ", "Mobile": 712345678.0, "Town": "Nyeri", "First Visit?": "Y"},
        {"Full Name": "Otieno", "Mobile": None, "Town": "Kisumu", "First Visit?": "no"},
    ]
    mapping = ColumnMapping(
        name="Full Name", phone="Mobile", location="Town", is_first_time_guest="First Visit?"
    )

    result = run_import(rows, event, user, mapping)

    assert result.registered_count == 2
    wanjiru = AttendeeRepository.find_by_phone("712345678")
    assert wanjiru.name == "Wanjiru"
    assert wanjiru.place_of_residence == "Nyeri"
    registrations = {
        r.attendee.name: r for r in EventRegistration.query.filter_by(event_id=event.id)
    }
    assert registrations["Wanjiru"].first_time_at_registration is True
    assert registrations["Otieno"].first_time_at_registration is False


def test_mapping_to_missing_column_aborts_before_any_row(event: Event, user: User) -> None:
    mapping = ColumnMapping(name="Full Name", phone="Phone Number")

    with pytest.raises(ValidationError):
        run_import([{"Full Name": "Amina"}], event, user, mapping)
    assert Attendee.query.count() == 0


def test_mapping_requires_name() -> None:
    with pytest.raises(ValidationError):
        ColumnMapping(name="").validate({"name"})


def test_mapping_from_dict_accepts_camel_case_flag() -> None:
    mapping = ColumnMapping.from_dict({"name": "Name", "isFirstTimeGuest": "New?"})

    assert mapping.is_first_time_guest == "New?"
    with pytest.raises(ValidationError):
        ColumnMapping.from_dict({"name": "Name", "email": "Email"})


def test_no_event_selector_aborts_batch(user: User) -> None:
    with pytest.raises(ValidationError):
        BulkImportService.import_rows([{"name": "Amina"}], EventSelector(), user.id)
    assert Attendee.query.count() == 0


def test_inactive_event_aborts_batch(event: Event, user: User) -> None:
    EventService.update_event(event.id, {"is_active": False})

    with pytest.raises(EventNotFoundOrInactiveError):
        run_import([{"name": "Amina"}], event, user)
    assert Attendee.query.count() == 0


def test_new_event_is_created_for_the_import(user: User) -> None:
    selector = EventSelector(
        new_event={"name": "Retreat", "date": "2026-09-12", "location": "Naivasha"}
    )

    result = BulkImportService.import_rows([{"name": "Amina", "phone": "0712"}], selector, user.id)

    event = Event.query.filter_by(name="Retreat").one()
    assert result.event_id == event.id
    assert event.is_active is True
    assert event.created_by == user.id
    assert result.registered_count == 1


def test_row_failure_is_recorded_and_batch_continues(
    event: Event, user: User, monkeypatch: pytest.MonkeyPatch
) -> None:
    original = IdentityResolver.resolve_attendee

    def flaky(attendee_data, *args, **kwargs):
        if attendee_data["name"] == "Broken":
            raise RuntimeError("boom")
        return original(attendee_data, *args, **kwargs)

    monkeypatch.setattr(IdentityResolver, "resolve_attendee", staticmethod(flaky))

    result = run_import([{"name": "Broken"}, {"name": "Fine", "phone": "0799"}], event, user)

    assert result.errors == ["Error processing row for Broken: boom"]
    assert result.registered_count == 1
    assert AttendeeRepository.find_by_phone("0799") is not None


def test_missing_first_time_column_defaults_to_returning(event: Event, user: User) -> None:
    run_import([{"name": "Amina", "phone": "0712"}], event, user)

    registration = EventRegistration.query.filter_by(event_id=event.id).one()
    assert registration.first_time_at_registration is False


@pytest.mark.parametrize(
    "value,expected",
    [
        (True, True),
        (False, False),
        ("TRUE", True),
        (" yes ", True),
        ("1", True),
        ("y", True),
        ("False", False),
        ("No", False),
        ("0", False),
        ("n", False),
        ("maybe", None),
        ("", None),
        (1, True),
        (0, False),
        (2.5, True),
        (None, None),
    ],
)
def test_coerce_first_time_guest(value: t.Any, expected: t.Optional[bool]) -> None:
    assert coerce_first_time_guest(value) is expected


def test_duplicate_first_time_rows_leave_attendee_returning(event: Event, user: User) -> None:
    rows = [{"name": "A", "phone": "111", "isFirstTimeGuest": "yes"}] * 2

    result = run_import(rows, event, user)

    assert result.registered_count == 1
    assert result.errors == ["Attendee A is already registered for this event"]
    assert AttendeeRepository.find_by_phone("111").is_first_time_guest is False
    assert EventRegistration.query.one().first_time_at_registration is True


def test_import_after_door_registration_keeps_attendee_returning(event: Event, user: User) -> None:
    DoorRegistrationService.register_at_door(
        event.id, {"name": "Grace", "phone_number": "0755555555"}, True, user.id
    )

    result = run_import(
        [{"name": "Grace", "phone": "0755555555", "isFirstTimeGuest": "yes"}], event, user
    )

    assert result.errors == ["Attendee Grace is already registered for this event"]
    assert AttendeeRepository.find_by_phone("0755555555").is_first_time_guest is False


def test_constraint_duplicate_is_reported_like_any_duplicate(
    event: Event, user: User, monkeypatch: pytest.MonkeyPatch
) -> None:
    # Concurrent writer: the lookup misses a registration the database already holds.
    monkeypatch.setattr(
        EventRegistrationRepository,
        "find_by_event_and_attendee",
        staticmethod(lambda event_id, attendee_id: None),
    )
    rows = [
        {"name": "A New", "phone": "111", "location": "Kisumu"},
        {"name": "A New", "phone": "111", "location": "Nakuru"},
    ]

    result = run_import(rows, event, user)

    assert result.registered_count == 1
    assert result.errors == ["Attendee A New is already registered for this event"]
    assert EventRegistration.query.count() == 1
    assert AttendeeRepository.find_by_phone("111").place_of_residence == "Nakuru"
