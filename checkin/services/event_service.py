from datetime import datetime
from flask import current_app
from checkin.extensions import db
from checkin.exceptions import MissingFieldsError, NotFoundError, ValidationError
from checkin.models import Event
from checkin.repositories import AttendeeRepository, EventRepository, EventRegistrationRepository
from checkin.utils.clock import get_clock
from typing import List


def _parse_date(field, value):
    try:
        return datetime.strptime(value, "%Y-%m-%d").date().isoformat()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date format for {field}, expected YYYY-MM-DD")


def _parse_time(field, value):
    if value in (None, ""):
        return None
    try:
        return datetime.strptime(value, "%H:%M").strftime("%H:%M")
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid time format for {field}, expected HH:MM")


def _parse_capacity(value):
    if value in (None, ""):
        return None
    if isinstance(value, bool):
        raise ValidationError("Invalid format for max_capacity, must be an integer")
    try:
        capacity = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Invalid format for max_capacity, must be an integer")
    if capacity <= 0:
        raise ValidationError("max_capacity must be a positive integer")
    return capacity


class EventService:
    @staticmethod
    def create_event(data, user_id) -> Event:
        required_fields = ["name", "date"]
        missing = [f for f in required_fields if not data.get(f)]
        if missing:
            raise MissingFieldsError(missing)

        name = str(data["name"]).strip()
        if not name:
            raise MissingFieldsError(["name"])

        try:
            event = EventRepository.create_event(
                {
                    "name": name,
                    "description": data.get("description"),
                    "date": _parse_date("date", data["date"]),
                    "start_time": _parse_time("start_time", data.get("start_time")),
                    "end_time": _parse_time("end_time", data.get("end_time")),
                    "location": data.get("location"),
                    "max_capacity": _parse_capacity(data.get("max_capacity")),
                    "is_active": True,
                    "created_by": user_id,
                }
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(f"User {user_id} created event {event.id} ({event.name})")
        return event

    @staticmethod
    def update_event(event_id: int, data: dict) -> Event:
        event = EventRepository.get_event(event_id)
        if not event:
            raise NotFoundError(f"Event with ID {event_id} not found")

        allowed_fields = [
            "name",
            "description",
            "date",
            "start_time",
            "end_time",
            "location",
            "max_capacity",
            "is_active",
        ]
        update_data = {}
        for field in allowed_fields:
            if field not in data:
                continue
            value = data[field]
            if field == "date":
                update_data[field] = _parse_date(field, value)
            elif field in ("start_time", "end_time"):
                update_data[field] = _parse_time(field, value)
            elif field == "max_capacity":
                update_data[field] = _parse_capacity(value)
            elif field == "is_active":
                if not isinstance(value, bool):
                    raise ValidationError("is_active must be a boolean")
                update_data[field] = value
            elif field == "name":
                if not value or not str(value).strip():
                    raise ValidationError("Event name cannot be blank")
                update_data[field] = str(value).strip()
            else:
                update_data[field] = value

        if not update_data:
            return event

        try:
            EventRepository.update_event(event, update_data)
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise
        current_app.logger.info(f"Updated event {event_id}: {sorted(update_data)}")
        return event

    @staticmethod
    def _with_counts(event: Event) -> dict:
        return {
            **event.to_dict(),
            "registration_count": EventRegistrationRepository.count_by_event_id(event.id),
            "attended_count": EventRegistrationRepository.count_attended_by_event_id(event.id),
        }

    @staticmethod
    def get_events(include_inactive: bool = False) -> List[dict]:
        return [
            EventService._with_counts(event)
            for event in EventRepository.get_events(include_inactive)
        ]

    @staticmethod
    def get_event_detail(event_id: int):
        event = EventRepository.get_event(event_id)
        if not event:
            return None

        registrations = EventRegistrationRepository.get_by_event_id(event_id)
        attendees = {
            attendee.id: attendee
            for attendee in AttendeeRepository.get_many({r.attendee_id for r in registrations})
        }
        return {
            **event.to_dict(),
            "registrations": [
                {
                    **registration.to_dict(),
                    "attendee": (
                        attendees[registration.attendee_id].to_dict()
                        if registration.attendee_id in attendees
                        else None
                    ),
                }
                for registration in registrations
            ],
            "registration_count": len(registrations),
            "attended_count": len([r for r in registrations if r.has_attended]),
        }

    @staticmethod
    def get_upcoming_events(today: str = None, clock=None) -> List[Event]:
        today = today or get_clock(clock).today()
        return EventRepository.get_upcoming(today)
