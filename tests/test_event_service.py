import typing as t

import pytest

from checkin.exceptions import MissingFieldsError, NotFoundError, ValidationError
from checkin.models import Event, User
from checkin.services import DoorRegistrationService, EventService


def test_create_event_defaults(user: User) -> None:
    event = EventService.create_event(
        {"name": " Youth Night ", "date": "2026-11-01", "start_time": "18:00", "max_capacity": "50"},
        user.id,
    )

    assert event.name == "Youth Night"
    assert event.is_active is True
    assert event.max_capacity == 50
    assert event.start_time == "18:00"
    assert event.created_by == user.id


def test_create_event_requires_name_and_date(user: User) -> None:
    with pytest.raises(MissingFieldsError) as exc:
        EventService.create_event({"description": "No name"}, user.id)
    assert exc.value.fields == ["name", "date"]


@pytest.mark.parametrize(
    "data",
    [
        {"name": "Bad date", "date": "18/10/2026"},
        {"name": "Bad time", "date": "2026-10-18", "end_time": "7pm"},
        {"name": "Bad capacity", "date": "2026-10-18", "max_capacity": 0},
        {"name": "Bad capacity", "date": "2026-10-18", "max_capacity": "lots"},
    ],
)
def test_create_event_validates_fields(user: User, data: dict) -> None:
    with pytest.raises(ValidationError):
        EventService.create_event(data, user.id)
    assert Event.query.count() == 0


def test_update_event_toggles_active(event: Event) -> None:
    EventService.update_event(event.id, {"is_active": False, "location": "Hall B"})

    assert event.is_active is False
    assert event.location == "Hall B"


def test_update_missing_event(app: t.Any) -> None:
    with pytest.raises(NotFoundError):
        EventService.update_event(123, {"name": "Nope"})


def test_list_events_hides_inactive_and_counts(
    make_event: t.Callable[..., Event], user: User
) -> None:
    active = make_event(name="Active")
    inactive = make_event(name="Inactive", date="2026-10-11")
    EventService.update_event(inactive.id, {"is_active": False})
    DoorRegistrationService.register_at_door(active.id, {"name": "Amina"}, False, user.id)

    listed = EventService.get_events()
    assert [e["name"] for e in listed] == ["Active"]
    assert listed[0]["registration_count"] == 1
    assert listed[0]["attended_count"] == 1

    assert len(EventService.get_events(include_inactive=True)) == 2


def test_event_detail_includes_attendees(event: Event, user: User) -> None:
    DoorRegistrationService.register_at_door(
        event.id, {"name": "Amina", "phone_number": "0712"}, False, user.id
    )

    detail = EventService.get_event_detail(event.id)

    assert detail["registration_count"] == 1
    assert detail["registrations"][0]["attendee"]["phone_number"] == "0712"
    assert EventService.get_event_detail(999) is None


def test_upcoming_events(make_event: t.Callable[..., Event]) -> None:
    make_event(name="Past", date="2026-10-11")
    make_event(name="Today")
    make_event(name="Next", date="2026-10-25")

    assert [e.name for e in EventService.get_upcoming_events()] == ["Today", "Next"]
    assert [e.name for e in EventService.get_upcoming_events("2026-10-20")] == ["Next"]
