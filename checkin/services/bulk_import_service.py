from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
from flask import current_app
from checkin.extensions import db
from checkin.exceptions import (
    AlreadyRegisteredError,
    EventNotFoundOrInactiveError,
    ValidationError,
)
from checkin.models import Event
from checkin.repositories import EventRepository
from checkin.services.door_registration_service import DoorRegistrationService
from checkin.services.event_service import EventService
from checkin.services.identity_resolver import IdentityResolver

TRUE_VALUES = {"true", "yes", "1", "y"}
FALSE_VALUES = {"false", "no", "0", "n"}

# Logical field -> key used when rows already carry logical keys
DEFAULT_SOURCE_KEYS = {
    "name": "name",
    "phone": "phone",
    "location": "location",
    "is_first_time_guest": "isFirstTimeGuest",
}


def coerce_first_time_guest(value: Any) -> Optional[bool]:
    """Interprets a spreadsheet cell as a first-time flag; ``None`` if it can't."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in TRUE_VALUES:
            return True
        if lowered in FALSE_VALUES:
            return False
        return None
    if isinstance(value, (int, float)):
        return bool(value)
    return None


def _cell_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    # Spreadsheets hand phone numbers back as floats
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    text = str(value).strip()
    return text or None


def _available_keys(rows: Iterable[dict]) -> set:
    keys = set()
    for row in rows:
        keys.update(row.keys())
    return keys


@dataclass
class ColumnMapping:
    """Which source column feeds each logical import field."""

    name: str
    phone: Optional[str] = None
    location: Optional[str] = None
    is_first_time_guest: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "ColumnMapping":
        unknown = set(data) - set(DEFAULT_SOURCE_KEYS) - {"isFirstTimeGuest"}
        if unknown:
            raise ValidationError(f"Unknown mapping fields: {', '.join(sorted(unknown))}")
        return cls(
            name=data.get("name"),
            phone=data.get("phone"),
            location=data.get("location"),
            is_first_time_guest=data.get("is_first_time_guest", data.get("isFirstTimeGuest")),
        )

    @classmethod
    def for_rows(cls, rows: List[dict]) -> "ColumnMapping":
        """Mapping for rows that already use the logical keys."""
        available = _available_keys(rows)
        return cls(
            **{
                logical: (source if logical == "name" or source in available else None)
                for logical, source in DEFAULT_SOURCE_KEYS.items()
            }
        )

    def sources(self) -> Dict[str, Optional[str]]:
        return {
            "name": self.name,
            "phone": self.phone,
            "location": self.location,
            "is_first_time_guest": self.is_first_time_guest,
        }

    def validate(self, available_keys) -> "ColumnMapping":
        if not self.name:
            raise ValidationError("A source column must be mapped to name")
        for logical, source in self.sources().items():
            if source is None:
                continue
            if not isinstance(source, str) or not source.strip():
                raise ValidationError(f"Mapping for {logical} must be a column name")
            if available_keys and source not in available_keys:
                raise ValidationError(f"Column '{source}' mapped to {logical} is not in the data")
        return self

    def extract(self, row: dict) -> dict:
        def cell(source):
            return row.get(source) if source else None

        return {
            "name": _cell_text(cell(self.name)),
            "phone_number": _cell_text(cell(self.phone)),
            "place_of_residence": _cell_text(cell(self.location)),
            "is_first_time_guest": coerce_first_time_guest(cell(self.is_first_time_guest)),
        }


@dataclass
class EventSelector:
    event_id: Optional[int] = None
    new_event: Optional[dict] = None


@dataclass
class ImportResult:
    event_id: int
    created_count: int = 0
    updated_count: int = 0
    registered_count: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def created_or_updated_count(self) -> int:
        return self.created_count + self.updated_count

    def to_dict(self):
        return {
            "event_id": self.event_id,
            "created_or_updated_count": self.created_or_updated_count,
            "created_count": self.created_count,
            "updated_count": self.updated_count,
            "registered_count": self.registered_count,
            "errors": self.errors,
        }


class BulkImportService:
    @staticmethod
    def resolve_target_event(selector: EventSelector, user_id: int) -> Event:
        if selector.new_event:
            return EventService.create_event(selector.new_event, user_id)
        if selector.event_id is not None:
            event = EventRepository.get_event(selector.event_id)
            if not event or not event.is_active:
                raise EventNotFoundOrInactiveError()
            return event
        raise ValidationError(
            "Either an existing event ID or new event details must be provided"
        )

    @staticmethod
    def import_rows(
        rows: List[dict],
        selector: EventSelector,
        user_id: int,
        mapping: Optional[ColumnMapping] = None,
        clock=None,
    ) -> ImportResult:
        """Registers every row against one event as attended.

        Rows are processed one at a time and each commits on its own; a bad
        row is recorded in ``errors`` and never stops the batch. Event
        capacity is not enforced here.
        """
        mapping = (mapping or ColumnMapping.for_rows(rows)).validate(_available_keys(rows))
        event = BulkImportService.resolve_target_event(selector, user_id)
        result = ImportResult(event_id=event.id)
        created_ids, updated_ids = set(), set()

        current_app.logger.info(
            f"Importing {len(rows)} rows into event {event.id} for user {user_id}"
        )

        for index, row in enumerate(rows, start=1):
            try:
                values = mapping.extract(row)
            except Exception as e:
                result.errors.append(f"Error processing row {index}: {str(e)}")
                continue

            name = values["name"]
            if not name:
                result.errors.append(f"Skipping row {index}: name missing")
                continue

            is_first_time_guest = values["is_first_time_guest"]
            if is_first_time_guest is None:
                is_first_time_guest = False

            try:
                resolution = IdentityResolver.resolve_attendee(
                    {
                        "name": name,
                        "phone_number": values["phone_number"],
                        "place_of_residence": values["place_of_residence"],
                    },
                    user_id,
                    is_first_time_guest=is_first_time_guest,
                )
                attendee_id = resolution.attendee.id
                try:
                    DoorRegistrationService.admit(
                        event.id, resolution.attendee, user_id, clock=clock
                    )
                    registered = True
                except AlreadyRegisteredError:
                    registered = False
                db.session.commit()
            except Exception as e:
                db.session.rollback()
                current_app.logger.error(
                    f"Import row {index} ({name}) failed: {str(e)}", exc_info=True
                )
                result.errors.append(f"Error processing row for {name}: {str(e)}")
                continue

            if resolution.created:
                created_ids.add(attendee_id)
            elif attendee_id not in created_ids:
                updated_ids.add(attendee_id)

            if registered:
                result.registered_count += 1
            else:
                result.errors.append(f"Attendee {name} is already registered for this event")

        result.created_count = len(created_ids)
        result.updated_count = len(updated_ids)
        current_app.logger.info(
            f"Import into event {event.id} finished: {result.to_dict()}"
        )
        return result
