from typing import List, Optional
from checkin.extensions import db
from checkin.models import Attendee


class AttendeeRepository:
    @staticmethod
    def get(attendee_id: int) -> Optional[Attendee]:
        return db.session.get(Attendee, attendee_id)

    @staticmethod
    def get_all() -> List[Attendee]:
        return Attendee.query.order_by(Attendee.id.asc()).all()

    @staticmethod
    def find_by_phone(phone_number: str) -> Optional[Attendee]:
        """Returns the canonical (oldest) attendee holding this phone number."""
        return (
            Attendee.query.filter_by(phone_number=phone_number)
            .order_by(Attendee.id.asc())
            .first()
        )

    @staticmethod
    def find_by_name(name: str) -> List[Attendee]:
        return Attendee.query.filter_by(name=name).order_by(Attendee.id.asc()).all()

    @staticmethod
    def search_by_name(term: str, limit: int = 10) -> List[Attendee]:
        return (
            Attendee.query.filter(Attendee.name.ilike(f"%{term}%"))
            .order_by(Attendee.name.asc(), Attendee.id.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_many(attendee_ids) -> List[Attendee]:
        if not attendee_ids:
            return []
        return Attendee.query.filter(Attendee.id.in_(list(attendee_ids))).all()

    @staticmethod
    def create(attrs) -> Attendee:
        attendee = Attendee(**attrs)
        db.session.add(attendee)
        db.session.flush()
        return attendee

    @staticmethod
    def update(attendee: Attendee, attrs: dict) -> Attendee:
        for key, value in attrs.items():
            if hasattr(attendee, key):
                setattr(attendee, key, value)
        db.session.flush()
        return attendee
