from checkin.services.identity_resolver import IdentityResolver
from checkin.services.capacity_guard import CapacityGuard
from checkin.services.door_registration_service import DoorRegistrationService
from checkin.services.event_service import EventService
from checkin.services.bulk_import_service import BulkImportService
from checkin.services.attendee_service import AttendeeService
from checkin.services.analytics_service import AnalyticsService
