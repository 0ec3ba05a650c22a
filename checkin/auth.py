from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError
from checkin.exceptions import UnauthenticatedError
from checkin.repositories import UserRepository


def get_current_user_id() -> int:
    """Returns the id of the organizer making the request."""
    try:
        verify_jwt_in_request()
        identity = get_jwt_identity()
    except (JWTExtendedException, PyJWTError) as e:
        raise UnauthenticatedError() from e

    try:
        user_id = int(identity)
    except (TypeError, ValueError) as e:
        raise UnauthenticatedError("Invalid token identity") from e

    if not UserRepository.find_by_id(user_id):
        raise UnauthenticatedError("User not found")
    return user_id
