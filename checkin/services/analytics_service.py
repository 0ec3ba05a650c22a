from collections import Counter
from checkin.exceptions import NotFoundError, ValidationError
from checkin.repositories import (
    AttendeeRepository,
    EventRegistrationRepository,
    EventRepository,
)
from checkin.utils.clock import get_clock, local_date


def _guest_type(is_first_time: bool) -> str:
    return "firstTime" if is_first_time else "returning"


def _rate(part: int, whole: int) -> int:
    return round(part / whole * 100) if whole else 0


class AnalyticsService:
    """Read-only tallies over events, attendees and registrations."""

    @staticmethod
    def dashboard_stats(clock=None):
        clock = get_clock(clock)
        today = clock.today()

        events = EventRepository.get_events(include_inactive=True)
        attendees = AttendeeRepository.get_all()
        registrations = EventRegistrationRepository.get_all()

        def attended_today(registration):
            if not registration.has_attended or not registration.attendance_time:
                return False
            return local_date(registration.attendance_time, clock.tz) == today

        return {
            "total_events": len(events),
            "active_events": len([e for e in events if e.is_active]),
            "todays_events": len([e for e in events if e.is_active and e.date == today]),
            "total_attendees": len(attendees),
            "total_registrations": len(registrations),
            "todays_registrations": len(
                [r for r in registrations if r.registration_date == today]
            ),
            "todays_attendance": len([r for r in registrations if attended_today(r)]),
            "gender_stats": dict(Counter(a.gender.value for a in attendees)),
        }

    @staticmethod
    def event_analytics(event_id: int):
        event = EventRepository.get_event(event_id)
        if not event:
            raise NotFoundError("Event not found")

        registrations = EventRegistrationRepository.get_by_event_id(event_id)
        attendees = {
            a.id: a
            for a in AttendeeRepository.get_many({r.attendee_id for r in registrations})
        }
        known = [r for r in registrations if r.attendee_id in attendees]
        attended_count = len([r for r in registrations if r.has_attended])

        return {
            "event": event.to_dict(),
            "total_registrations": len(registrations),
            "attended_count": attended_count,
            "attendance_rate": _rate(attended_count, len(registrations)),
            "demographics": {
                "gender": dict(Counter(attendees[r.attendee_id].gender.value for r in known)),
                # Guest type as it was when each person registered
                "guest_type": dict(
                    Counter(_guest_type(r.first_time_at_registration) for r in known)
                ),
            },
            "registrations_by_date": dict(Counter(r.registration_date for r in registrations)),
        }

    @staticmethod
    def monthly_stats(year: int, month: int):
        if not 1 <= month <= 12:
            raise ValidationError("month must be between 1 and 12")

        start_date = f"{year:04d}-{month:02d}-01"
        end_date = f"{year:04d}-{month:02d}-31"
        events = EventRepository.get_between(start_date, end_date)
        registrations = EventRegistrationRepository.get_by_event_ids([e.id for e in events])
        attended = [r for r in registrations if r.has_attended]
        attendees = {
            a.id: a
            for a in AttendeeRepository.get_many({r.attendee_id for r in registrations})
        }

        # Counted per registration: someone at two events counts twice
        gender_stats, guest_type_stats, location_stats = Counter(), Counter(), Counter()
        for registration in registrations:
            attendee = attendees.get(registration.attendee_id)
            if not attendee:
                continue
            gender_stats[attendee.gender.value] += 1
            guest_type_stats[_guest_type(registration.first_time_at_registration)] += 1
            if attendee.place_of_residence and attendee.place_of_residence.strip():
                location_stats[attendee.place_of_residence.strip()] += 1

        return {
            "total_events": len(events),
            "total_registrations": len(registrations),
            "total_attendance": len(attended),
            "average_attendance_rate": _rate(len(attended), len(registrations)),
            "events_by_date": dict(Counter(e.date for e in events)),
            "registrations_by_date": dict(Counter(r.registration_date for r in registrations)),
            "gender_stats": dict(gender_stats),
            "guest_type_stats": dict(guest_type_stats),
            "top_locations": [
                {"location": location, "count": count}
                for location, count in location_stats.most_common(5)
            ],
        }
