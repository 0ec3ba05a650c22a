from typing import List, Optional
from flask import current_app
from sqlalchemy.exc import IntegrityError
from checkin.extensions import db
from checkin.exceptions import (
    AlreadyAttendedError,
    AlreadyRegisteredError,
    NotRegisteredError,
)
from checkin.models import Attendee, EventRegistration
from checkin.repositories import AttendeeRepository, EventRegistrationRepository
from checkin.services.capacity_guard import CapacityGuard
from checkin.services.identity_resolver import IdentityResolver
from checkin.utils.clock import get_clock


class DoorRegistrationService:
    @staticmethod
    def clear_first_time_flag(attendee: Attendee):
        """A person stops being a first-time guest at their first recorded attendance."""
        if attendee and attendee.is_first_time_guest:
            AttendeeRepository.update(attendee, {"is_first_time_guest": False})

    @staticmethod
    def admit(event_id: int, attendee: Attendee, user_id: int, clock=None) -> EventRegistration:
        """Registers ``attendee`` for the event as already attended.

        Runs inside the caller's transaction; the caller commits.
        """
        clock = get_clock(clock)
        existing_registration = EventRegistrationRepository.find_by_event_and_attendee(
            event_id, attendee.id
        )
        if existing_registration:
            current_app.logger.warning(
                f"Attendee {attendee.id} already registered for event {event_id}"
            )
            raise AlreadyRegisteredError()

        now = clock.now()
        try:
            registration = EventRegistrationRepository.register_for_event(
                {
                    "event_id": event_id,
                    "attendee_id": attendee.id,
                    "registration_date": clock.today(),
                    "registration_time": now,
                    "registered_by": user_id,
                    "has_attended": True,
                    "attendance_time": now,
                    "first_time_at_registration": attendee.is_first_time_guest,
                }
            )
        except IntegrityError as e:
            # A concurrent request inserted the same pair after our lookup.
            current_app.logger.warning(
                f"Unique constraint rejected duplicate registration of attendee {attendee.id} for event {event_id}"
            )
            raise AlreadyRegisteredError() from e

        DoorRegistrationService.clear_first_time_flag(attendee)
        return registration

    @staticmethod
    def register_at_door(
        event_id: int,
        attendee_data: dict,
        is_first_time_guest: bool,
        user_id: int,
        use_existing_attendee: bool = False,
        existing_attendee_id: Optional[int] = None,
        clock=None,
    ) -> int:
        """Registers a person for an event and records their attendance in one step.

        The capacity check, identity resolution, duplicate check and insert run
        in a single transaction; any failure rolls all of them back.
        """
        current_app.logger.info(
            f"Door registration attempt for event {event_id} by user {user_id}"
        )
        try:
            event = CapacityGuard.check_and_admit(event_id)
            resolution = IdentityResolver.resolve_attendee(
                attendee_data,
                user_id,
                is_first_time_guest=is_first_time_guest,
                use_existing_attendee=use_existing_attendee,
                existing_attendee_id=existing_attendee_id,
            )
            registration = DoorRegistrationService.admit(
                event.id, resolution.attendee, user_id, clock=clock
            )
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(
            f"Registered attendee {registration.attendee_id} for event {event_id} at the door"
        )
        return registration.id

    @staticmethod
    def mark_attendance(event_id: int, attendee_id: int, user_id: int, clock=None):
        """Records attendance for a registration created before door registration existed."""
        clock = get_clock(clock)
        registration = EventRegistrationRepository.find_by_event_and_attendee(
            event_id, attendee_id
        )
        if not registration:
            raise NotRegisteredError()
        if registration.has_attended:
            raise AlreadyAttendedError()

        try:
            EventRegistrationRepository.mark_attended(registration, clock.now())
            DoorRegistrationService.clear_first_time_flag(AttendeeRepository.get(attendee_id))
            db.session.commit()
        except Exception:
            db.session.rollback()
            raise

        current_app.logger.info(
            f"User {user_id} recorded attendance of attendee {attendee_id} at event {event_id}"
        )

    @staticmethod
    def get_event_registrations(event_id: int, attended_only: bool = False) -> List[dict]:
        registrations = EventRegistrationRepository.get_by_event_id(event_id, attended_only)
        return [
            {**registration.to_dict(), "attendee": registration.attendee.to_dict()}
            for registration in registrations
        ]
