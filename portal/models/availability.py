from ..extensions import db
from .base import TimestampMixin

class Availability(db.Model, TimestampMixin):
    __tablename__ = "availabilities"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    system_id = db.Column(db.Integer, db.ForeignKey("systems.id", ondelete="CASCADE"), nullable=False, index=True)
    start = db.Column(db.DateTime, nullable=False)
    end = db.Column(db.DateTime, nullable=False)

    __table_args__ = (
        db.CheckConstraint('"end" > start', name="ck_availability_window"),
    )

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "system_id": self.system_id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
        }
