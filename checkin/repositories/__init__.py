from checkin.repositories.user_repository import UserRepository
from checkin.repositories.event_repository import EventRepository
from checkin.repositories.attendee_repository import AttendeeRepository
from checkin.repositories.event_registration_repository import EventRegistrationRepository
