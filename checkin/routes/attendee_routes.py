from flask import Blueprint, jsonify, request
from flask_cors import cross_origin
from flask_jwt_extended import jwt_required
from checkin.services import AttendeeService

attendee_bp = Blueprint("attendee", __name__)


@attendee_bp.route("/attendees/search", methods=["GET"])
@cross_origin(supports_credentials=True)
@jwt_required()
def search_attendees():
    term = request.args.get("q", "")
    limit = request.args.get("limit", 10, type=int)
    attendees = AttendeeService.search(term, limit)
    return jsonify({"attendees": [attendee.to_dict() for attendee in attendees]}), 200


@attendee_bp.route("/attendees/by-phone/<phone_number>", methods=["GET"])
@cross_origin(supports_credentials=True)
@jwt_required()
def get_attendee_by_phone(phone_number):
    attendee = AttendeeService.get_by_phone(phone_number)
    return jsonify({"attendee": attendee.to_dict() if attendee else None}), 200


@attendee_bp.route("/attendees/<int:attendee_id>/history", methods=["GET"])
@cross_origin(supports_credentials=True)
@jwt_required()
def get_attendee_history(attendee_id):
    history = AttendeeService.get_history(attendee_id)
    if history is None:
        return jsonify({"error": f"Attendee with ID {attendee_id} not found"}), 404
    return jsonify(history), 200
