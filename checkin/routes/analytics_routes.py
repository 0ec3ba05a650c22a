from flask import Blueprint, jsonify, request
from flask_cors import cross_origin
from flask_jwt_extended import jwt_required
from checkin.services import AnalyticsService

analytics_bp = Blueprint("analytics", __name__)


@analytics_bp.route("/analytics/dashboard", methods=["GET"])
@cross_origin(supports_credentials=True)
@jwt_required()
def get_dashboard_stats():
    return jsonify(AnalyticsService.dashboard_stats()), 200


@analytics_bp.route("/analytics/events/<int:event_id>", methods=["GET"])
@cross_origin(supports_credentials=True)
@jwt_required()
def get_event_analytics(event_id):
    return jsonify(AnalyticsService.event_analytics(event_id)), 200


@analytics_bp.route("/analytics/monthly", methods=["GET"])
@cross_origin(supports_credentials=True)
@jwt_required()
def get_monthly_stats():
    year = request.args.get("year", type=int)
    month = request.args.get("month", type=int)
    if year is None or month is None:
        return jsonify({"error": "year and month are required"}), 400
    return jsonify(AnalyticsService.monthly_stats(year, month)), 200
