from flask import jsonify
from checkin.exceptions import CheckinError, MissingFieldsError


def truthy(value) -> bool:
    return str(value).lower() in ["true", "1", "t", "yes"]


def register_error_handlers(app):
    @app.errorhandler(CheckinError)
    def handle_checkin_error(error):
        body = {"error": error.message}
        if isinstance(error, MissingFieldsError):
            body["missing_fields"] = error.fields
        return jsonify(body), error.status_code
