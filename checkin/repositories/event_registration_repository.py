from typing import List, Optional
from checkin.extensions import db
from checkin.models import EventRegistration


class EventRegistrationRepository:
    @staticmethod
    def find_by_event_and_attendee(
        event_id: int, attendee_id: int
    ) -> Optional[EventRegistration]:
        return EventRegistration.query.filter_by(
            event_id=event_id, attendee_id=attendee_id
        ).first()

    @staticmethod
    def count_by_event_id(event_id: int) -> int:
        return EventRegistration.query.filter_by(event_id=event_id).count()

    @staticmethod
    def count_attended_by_event_id(event_id: int) -> int:
        return EventRegistration.query.filter_by(
            event_id=event_id, has_attended=True
        ).count()

    @staticmethod
    def get_by_event_id(event_id: int, attended_only: bool = False) -> List[EventRegistration]:
        query = EventRegistration.query.filter_by(event_id=event_id)
        if attended_only:
            query = query.filter(EventRegistration.has_attended.is_(True))
        return query.order_by(EventRegistration.registration_time.asc()).all()

    @staticmethod
    def get_by_event_ids(event_ids) -> List[EventRegistration]:
        if not event_ids:
            return []
        return EventRegistration.query.filter(
            EventRegistration.event_id.in_(list(event_ids))
        ).all()

    @staticmethod
    def get_by_attendee_id(attendee_id: int) -> List[EventRegistration]:
        return (
            EventRegistration.query.filter_by(attendee_id=attendee_id)
            .order_by(EventRegistration.registration_time.desc())
            .all()
        )

    @staticmethod
    def get_all() -> List[EventRegistration]:
        return EventRegistration.query.all()

    @staticmethod
    def has_attended_any(attendee_id: int) -> bool:
        return (
            EventRegistration.query.filter_by(attendee_id=attendee_id, has_attended=True).first()
            is not None
        )

    @staticmethod
    def register_for_event(attrs) -> EventRegistration:
        """Inserts a registration; raises ``IntegrityError`` on a duplicate pair.

        The insert runs in a savepoint so a rejected pair leaves the rest of
        the caller's transaction usable.
        """
        registration = EventRegistration(**attrs)
        with db.session.begin_nested():
            db.session.add(registration)
        return registration

    @staticmethod
    def mark_attended(registration: EventRegistration, attendance_time) -> EventRegistration:
        registration.has_attended = True
        registration.attendance_time = attendance_time
        db.session.add(registration)
        db.session.flush()
        return registration
