from typing import List
from checkin.models import Attendee
from checkin.repositories import AttendeeRepository, EventRegistrationRepository


class AttendeeService:
    @staticmethod
    def search(term: str, limit: int = 10) -> List[Attendee]:
        if not term or not term.strip():
            return []
        return AttendeeRepository.search_by_name(term.strip(), limit)

    @staticmethod
    def get_by_phone(phone_number: str):
        phone_number = (phone_number or "").strip()
        if not phone_number:
            return None
        return AttendeeRepository.find_by_phone(phone_number)

    @staticmethod
    def get_history(attendee_id: int):
        attendee = AttendeeRepository.get(attendee_id)
        if not attendee:
            return None

        registrations = EventRegistrationRepository.get_by_attendee_id(attendee_id)
        return {
            "attendee": attendee.to_dict(),
            "registrations": [
                {
                    **registration.to_dict(),
                    "event": registration.event.to_dict() if registration.event else None,
                }
                for registration in registrations
            ],
            "total_events": len(registrations),
            "attended_events": len([r for r in registrations if r.has_attended]),
        }
