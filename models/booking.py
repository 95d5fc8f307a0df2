"""Booking model definition."""

from .user import utcnow
from . import db


BOOKING_STATUSES = ("pending", "confirmed", "cancelled")


class Booking(db.Model):
    """Represents an appointment request from a client to a provider."""

    __tablename__ = "bookings"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    practitioner_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    booking_date = db.Column(db.DateTime, nullable=False, default=utcnow)
    status = db.Column(
        db.String(16),
        nullable=False,
        default="pending",
        server_default=db.text("'pending'"),
    )
    notes = db.Column(db.Text, nullable=True)

    client = db.relationship(
        "User",
        foreign_keys=[user_id],
        backref=db.backref("bookings", lazy="dynamic"),
    )
    practitioner = db.relationship(
        "User",
        foreign_keys=[practitioner_id],
        backref=db.backref("appointments", lazy="dynamic"),
    )

    def __repr__(self) -> str:
        return (
            f"<Booking id={self.id} user_id={self.user_id} "
            f"practitioner_id={self.practitioner_id} status={self.status}>"
        )

    def to_dict(self) -> dict:
        """Serialize the booking into a dictionary."""

        return {
            "id": self.id,
            "user_id": self.user_id,
            "practitioner_id": self.practitioner_id,
            "booking_date": self.booking_date.isoformat() if self.booking_date else None,
            "status": self.status,
            "notes": self.notes,
        }
