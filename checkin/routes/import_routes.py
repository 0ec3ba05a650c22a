from flask import Blueprint, jsonify, request
from flask_cors import cross_origin
from flask_jwt_extended import jwt_required
from checkin.auth import get_current_user_id
from checkin.exceptions import ValidationError
from checkin.extensions import limiter
from checkin.services.bulk_import_service import (
    BulkImportService,
    ColumnMapping,
    EventSelector,
)

import_bp = Blueprint("import", __name__)


@import_bp.route("/imports", methods=["POST", "OPTIONS"])
@cross_origin(supports_credentials=True)
@limiter.limit("30 per minute")
@jwt_required()
def import_attendees():
    if request.method == "OPTIONS":
        return "", 204

    current_user_id = get_current_user_id()
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "No data provided"}), 400

    rows = data.get("rows")
    if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
        raise ValidationError("rows must be a list of objects")

    mapping = None
    if data.get("column_mapping") is not None:
        if not isinstance(data["column_mapping"], dict):
            raise ValidationError("column_mapping must be an object")
        mapping = ColumnMapping.from_dict(data["column_mapping"])

    new_event = data.get("new_event")
    if new_event is not None and not isinstance(new_event, dict):
        raise ValidationError("new_event must be an object")

    selector = EventSelector(event_id=data.get("event_id"), new_event=new_event)
    result = BulkImportService.import_rows(rows, selector, current_user_id, mapping)
    return jsonify(result.to_dict()), 200
