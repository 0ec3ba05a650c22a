from checkin.extensions import db


class EventRegistration(db.Model):
    __tablename__ = "event_registrations"

    id = db.Column(db.Integer, primary_key=True)
    event_id = db.Column(db.Integer, db.ForeignKey("events.id"), nullable=False, index=True)
    attendee_id = db.Column(
        db.Integer, db.ForeignKey("attendees.id"), nullable=False, index=True
    )
    registration_date = db.Column(db.String(10), nullable=False, index=True)
    registration_time = db.Column(db.TIMESTAMP(timezone=True), nullable=False)
    registered_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    has_attended = db.Column(db.Boolean, nullable=False, default=False)
    attendance_time = db.Column(db.TIMESTAMP(timezone=True), nullable=True)
    first_time_at_registration = db.Column(db.Boolean, nullable=False, default=False)

    # Relationships
    event = db.relationship("Event", backref=db.backref("registrations", lazy="dynamic"))
    attendee = db.relationship(
        "Attendee", backref=db.backref("registrations", lazy="dynamic")
    )

    # An attendee can only be registered for an event once
    __table_args__ = (
        db.UniqueConstraint("event_id", "attendee_id", name="uq_event_attendee_registration"),
        db.CheckConstraint(
            "NOT has_attended OR attendance_time IS NOT NULL",
            name="ck_attended_has_time",
        ),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "event_id": self.event_id,
            "attendee_id": self.attendee_id,
            "registration_date": self.registration_date,
            "registration_time": (
                self.registration_time.isoformat() if self.registration_time else None
            ),
            "registered_by": self.registered_by,
            "has_attended": self.has_attended,
            "attendance_time": (
                self.attendance_time.isoformat() if self.attendance_time else None
            ),
            "first_time_at_registration": self.first_time_at_registration,
        }

    def __repr__(self):
        return (
            f"<EventRegistration event_id={self.event_id} attendee_id={self.attendee_id} "
            f"has_attended={self.has_attended}>"
        )
