from checkin.extensions import db
from checkin.models import User


class UserRepository:
    @staticmethod
    def create(attrs) -> User:
        user = User(**attrs)
        db.session.add(user)
        db.session.commit()
        return user

    @staticmethod
    def find_by_id(user_id: int):
        return db.session.get(User, user_id)
