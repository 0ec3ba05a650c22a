from flask import Blueprint, jsonify, request, current_app
from flask_cors import cross_origin
from flask_jwt_extended import jwt_required
from checkin.auth import get_current_user_id
from checkin.exceptions import ValidationError
from checkin.routes import truthy
from checkin.services import DoorRegistrationService, EventService

event_bp = Blueprint("event", __name__)


@event_bp.route("/events", methods=["GET", "OPTIONS"])
@cross_origin(supports_credentials=True)
@jwt_required()
def get_all_events():
    if request.method == "OPTIONS":
        return "", 204

    include_inactive = truthy(request.args.get("include_inactive", "false"))
    return jsonify({"events": EventService.get_events(include_inactive)}), 200


@event_bp.route("/events", methods=["POST"])
@cross_origin(supports_credentials=True)
@jwt_required()
def create_event():
    current_user_id = get_current_user_id()
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "No data provided"}), 400

    event = EventService.create_event(data, current_user_id)
    return jsonify(event.to_dict()), 201


@event_bp.route("/events/upcoming", methods=["GET"])
@cross_origin(supports_credentials=True)
@jwt_required()
def get_upcoming_events():
    events = EventService.get_upcoming_events(request.args.get("current_date"))
    return jsonify({"events": [event.to_dict() for event in events]}), 200


@event_bp.route("/events/<int:event_id>", methods=["GET"])
@cross_origin(supports_credentials=True)
@jwt_required()
def get_event(event_id):
    event = EventService.get_event_detail(event_id)
    if not event:
        return jsonify({"error": f"Event with ID {event_id} not found"}), 404
    return jsonify(event), 200


@event_bp.route("/events/<int:event_id>", methods=["PATCH", "PUT"])
@cross_origin(supports_credentials=True)
@jwt_required()
def update_event(event_id):
    get_current_user_id()
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "No data provided"}), 400

    event = EventService.update_event(event_id, data)
    return jsonify({"message": "Event updated successfully", "event": event.to_dict()}), 200


@event_bp.route("/events/<int:event_id>/door-registrations", methods=["POST", "OPTIONS"])
@cross_origin(supports_credentials=True)
@jwt_required()
def register_at_door(event_id):
    if request.method == "OPTIONS":
        return "", 204

    current_user_id = get_current_user_id()
    data = request.get_json(silent=True) or {}

    attendee_data = data.get("attendee")
    if not isinstance(attendee_data, dict):
        raise ValidationError("Attendee details are required")

    is_first_time_guest = data.get("is_first_time_guest", False)
    use_existing_attendee = data.get("use_existing_attendee", False)
    if not isinstance(is_first_time_guest, bool) or not isinstance(use_existing_attendee, bool):
        raise ValidationError("is_first_time_guest and use_existing_attendee must be booleans")

    existing_attendee_id = data.get("existing_attendee_id")
    if existing_attendee_id is not None and (
        isinstance(existing_attendee_id, bool) or not isinstance(existing_attendee_id, int)
    ):
        raise ValidationError("existing_attendee_id must be an integer")

    registration_id = DoorRegistrationService.register_at_door(
        event_id,
        attendee_data,
        is_first_time_guest,
        current_user_id,
        use_existing_attendee=use_existing_attendee,
        existing_attendee_id=existing_attendee_id,
    )
    return jsonify({"message": "Attendee registered and checked in", "registration_id": registration_id}), 201


@event_bp.route("/events/<int:event_id>/attendance", methods=["POST", "OPTIONS"])
@cross_origin(supports_credentials=True)
@jwt_required()
def record_attendance(event_id):
    if request.method == "OPTIONS":
        return "", 204

    current_user_id = get_current_user_id()
    data = request.get_json(silent=True) or {}
    attendee_id = data.get("attendee_id")
    if not isinstance(attendee_id, int) or isinstance(attendee_id, bool):
        return jsonify({"error": "attendee_id is required"}), 400

    DoorRegistrationService.mark_attendance(event_id, attendee_id, current_user_id)
    current_app.logger.info(f"Attendance recorded for attendee {attendee_id}, event {event_id}")
    return jsonify({"success": True}), 200


@event_bp.route("/events/<int:event_id>/registrations", methods=["GET"])
@cross_origin(supports_credentials=True)
@jwt_required()
def get_event_registrations(event_id):
    attended_only = truthy(request.args.get("attended_only", "false"))
    registrations = DoorRegistrationService.get_event_registrations(event_id, attended_only)
    return jsonify({"registrations": registrations}), 200
