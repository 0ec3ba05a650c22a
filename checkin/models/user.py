from checkin.extensions import db
from .enums import UserRole


class User(db.Model):
    """Authenticated organizer account; the source of ``registered_by`` stamps."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    name = db.Column(db.String(255), nullable=True)
    role = db.Column(db.Enum(UserRole), nullable=False, default=UserRole.USER)
    created_at = db.Column(
        db.TIMESTAMP(timezone=True), nullable=False, server_default=db.func.now()
    )

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value if self.role else None,
        }

    def __repr__(self):
        return f"User(id={self.id}, email='{self.email}', role={self.role})"
