from typing import List, Optional
from checkin.extensions import db
from checkin.models import Event


class EventRepository:
    @staticmethod
    def get_events(include_inactive: bool = False) -> List[Event]:
        query = Event.query
        if not include_inactive:
            query = query.filter(Event.is_active.is_(True))
        return query.order_by(Event.date.desc(), Event.id.desc()).all()

    @staticmethod
    def get_event(event_id: int) -> Optional[Event]:
        return db.session.get(Event, event_id)

    @staticmethod
    def get_event_for_update(event_id: int) -> Optional[Event]:
        """Loads the event and locks its row until the surrounding transaction ends.

        Registrations for one event serialize on this lock where the database
        supports row locking; SQLite ignores ``FOR UPDATE``.
        """
        return Event.query.filter_by(id=event_id).with_for_update().first()

    @staticmethod
    def get_upcoming(today: str, limit: int = 10) -> List[Event]:
        return (
            Event.query.filter(Event.date >= today, Event.is_active.is_(True))
            .order_by(Event.date.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def get_between(start_date: str, end_date: str) -> List[Event]:
        return (
            Event.query.filter(Event.date >= start_date, Event.date <= end_date)
            .order_by(Event.date.asc())
            .all()
        )

    @staticmethod
    def create_event(attrs) -> Event:
        event = Event(**attrs)
        db.session.add(event)
        db.session.flush()
        return event

    @staticmethod
    def update_event(event: Event, attrs: dict) -> Event:
        for key, value in attrs.items():
            if hasattr(event, key):
                setattr(event, key, value)
        db.session.flush()
        return event
