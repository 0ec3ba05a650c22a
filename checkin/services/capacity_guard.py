from flask import current_app
from checkin.exceptions import CapacityExceededError, EventNotFoundOrInactiveError
from checkin.models import Event
from checkin.repositories import EventRepository, EventRegistrationRepository


class CapacityGuard:
    @staticmethod
    def check_and_admit(event_id: int, lock: bool = True) -> Event:
        """Returns the event if it is active and has room for one more registration.

        With ``lock`` the event row stays locked until the caller's transaction
        ends, so the count below cannot go stale before the insert. No slot is
        reserved otherwise.
        """
        if lock:
            event = EventRepository.get_event_for_update(event_id)
        else:
            event = EventRepository.get_event(event_id)
        if not event or not event.is_active:
            raise EventNotFoundOrInactiveError()

        if event.max_capacity is not None:
            registration_count = EventRegistrationRepository.count_by_event_id(event_id)
            current_app.logger.info(
                f"Capacity check for event {event_id}: registrations={registration_count}/{event.max_capacity}"
            )
            if registration_count >= event.max_capacity:
                current_app.logger.warning(f"Event {event_id} is at capacity")
                raise CapacityExceededError()

        return event
