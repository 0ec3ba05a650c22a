from checkin.extensions import db
from .enums import Gender


class Attendee(db.Model):
    __tablename__ = "attendees"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    place_of_residence = db.Column(db.String(255), nullable=True)
    # Not unique at the storage level; the oldest row for a phone is canonical.
    phone_number = db.Column(db.String(50), nullable=True, index=True)
    gender = db.Column(db.Enum(Gender), nullable=False, default=Gender.OTHER)
    email = db.Column(db.String(255), nullable=True)
    is_first_time_guest = db.Column(db.Boolean, nullable=False, default=False)
    registered_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    created_at = db.Column(
        db.TIMESTAMP(timezone=True), nullable=False, server_default=db.func.now()
    )
    updated_at = db.Column(
        db.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=db.func.now(),
        onupdate=db.func.now(),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "place_of_residence": self.place_of_residence,
            "phone_number": self.phone_number,
            "gender": self.gender.value if self.gender else None,
            "email": self.email,
            "is_first_time_guest": self.is_first_time_guest,
            "registered_by": self.registered_by,
        }

    def __repr__(self):
        return (
            f"Attendee("
            f"id={self.id}, "
            f"name='{self.name}', "
            f"phone_number={self.phone_number}, "
            f"place_of_residence={self.place_of_residence}, "
            f"is_first_time_guest={self.is_first_time_guest}"
            f")"
        )
