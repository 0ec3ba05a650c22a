from dataclasses import dataclass
from typing import Optional
from flask import current_app
from checkin.exceptions import NotFoundError, ValidationError
from checkin.models import Attendee
from checkin.models.enums import Gender
from checkin.repositories import AttendeeRepository, EventRegistrationRepository


@dataclass
class Resolution:
    attendee: Attendee
    created: bool


def normalize_residence(value: Optional[str]) -> str:
    return (value or "").strip().casefold()


def clean_attendee_data(attendee_data: dict) -> dict:
    """Trims the submitted attendee fields and validates the required ones.

    Optional fields that are missing or blank come back as ``None`` so they
    never overwrite stored values.
    """
    name = (attendee_data.get("name") or "").strip()
    if not name:
        raise ValidationError("Attendee name is required")

    cleaned = {"name": name}
    for field in ("place_of_residence", "phone_number", "email"):
        value = attendee_data.get(field)
        if value is not None:
            value = str(value).strip()
        cleaned[field] = value or None

    gender = attendee_data.get("gender")
    if gender is None or isinstance(gender, Gender):
        cleaned["gender"] = gender
    else:
        try:
            cleaned["gender"] = Gender(str(gender).strip().lower())
        except ValueError:
            raise ValidationError(
                f"Invalid gender value: {gender}. Must be one of male, female, other"
            )
    return cleaned


class IdentityResolver:
    """Decides which stored attendee a submitted set of details refers to.

    Matching runs in a fixed order and the first hit wins:

    1. a caller-asserted attendee id,
    2. an exact phone number match,
    3. an exact name match whose place of residence is equal after trimming
       and case folding.

    Anything else creates a new attendee. A matched attendee has its fields
    overwritten with the submitted ones. Nothing here commits; callers own
    the transaction.
    """

    @staticmethod
    def find_match(cleaned: dict) -> Optional[Attendee]:
        phone_number = cleaned.get("phone_number")
        if phone_number:
            attendee = AttendeeRepository.find_by_phone(phone_number)
            if attendee:
                return attendee

        residence = normalize_residence(cleaned.get("place_of_residence"))
        if residence:
            for candidate in AttendeeRepository.find_by_name(cleaned["name"]):
                if normalize_residence(candidate.place_of_residence) == residence:
                    return candidate
        return None

    @staticmethod
    def _overwrite(attendee: Attendee, cleaned: dict, is_first_time_guest: bool) -> Attendee:
        attrs = {key: value for key, value in cleaned.items() if value is not None}
        # Nobody with a recorded attendance is a first-time guest again.
        if is_first_time_guest and EventRegistrationRepository.has_attended_any(attendee.id):
            is_first_time_guest = False
        attrs["is_first_time_guest"] = is_first_time_guest
        return AttendeeRepository.update(attendee, attrs)

    @staticmethod
    def resolve_attendee(
        attendee_data: dict,
        user_id: int,
        is_first_time_guest: bool = False,
        use_existing_attendee: bool = False,
        existing_attendee_id: Optional[int] = None,
    ) -> Resolution:
        cleaned = clean_attendee_data(attendee_data)

        if use_existing_attendee and existing_attendee_id is not None:
            attendee = AttendeeRepository.get(existing_attendee_id)
            if not attendee:
                current_app.logger.warning(
                    f"Caller asserted attendee {existing_attendee_id} which does not exist"
                )
                raise NotFoundError(f"Attendee with ID {existing_attendee_id} not found")
            return Resolution(
                IdentityResolver._overwrite(attendee, cleaned, is_first_time_guest), False
            )

        attendee = IdentityResolver.find_match(cleaned)
        if attendee:
            current_app.logger.info(
                f"Matched submitted details for '{cleaned['name']}' to attendee {attendee.id}"
            )
            return Resolution(
                IdentityResolver._overwrite(attendee, cleaned, is_first_time_guest), False
            )

        attendee = AttendeeRepository.create(
            {
                "name": cleaned["name"],
                "place_of_residence": cleaned["place_of_residence"],
                "phone_number": cleaned["phone_number"],
                "email": cleaned["email"],
                "gender": cleaned["gender"] or Gender.OTHER,
                "is_first_time_guest": is_first_time_guest,
                "registered_by": user_id,
            }
        )
        current_app.logger.info(f"Created attendee {attendee.id} for '{attendee.name}'")
        return Resolution(attendee, True)

    @staticmethod
    def resolve(
        attendee_data: dict,
        user_id: int,
        is_first_time_guest: bool = False,
        use_existing_attendee: bool = False,
        existing_attendee_id: Optional[int] = None,
    ) -> int:
        return IdentityResolver.resolve_attendee(
            attendee_data,
            user_id,
            is_first_time_guest=is_first_time_guest,
            use_existing_attendee=use_existing_attendee,
            existing_attendee_id=existing_attendee_id,
        ).attendee.id
