from checkin.models.user import User
from checkin.models.event import Event
from checkin.models.attendee import Attendee
from checkin.models.event_registration import EventRegistration
from checkin.models.enums import Gender, UserRole
