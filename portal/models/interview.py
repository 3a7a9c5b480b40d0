from datetime import timedelta
from ..extensions import db
from .base import TimestampMixin, enum_type
from .enums import InterviewStatus

class Interview(db.Model, TimestampMixin):
    __tablename__ = "interviews"

    id = db.Column(db.Integer, primary_key=True)
    application_id = db.Column(db.Integer, db.ForeignKey("applications.id", ondelete="SET NULL"), index=True)
    system_id = db.Column(db.Integer, db.ForeignKey("systems.id", ondelete="SET NULL"), index=True)
    interviewer_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"))
    scheduled_at = db.Column(db.DateTime, nullable=False, index=True)
    duration = db.Column(db.Integer, nullable=False, default=30)  # minutes
    status = db.Column(enum_type(InterviewStatus), nullable=False, default=InterviewStatus.SCHEDULED)
    location = db.Column(db.String(255))
    notes = db.Column(db.Text)
    created_by_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)

    __table_args__ = (
        db.UniqueConstraint("application_id", "system_id", name="uq_interviews_application_system"),
        db.UniqueConstraint("system_id", "scheduled_at", name="uq_interviews_system_slot"),
    )

    @property
    def ends_at(self):
        return self.scheduled_at + timedelta(minutes=self.duration or 30)

    def to_dict(self):
        return {
            "id": self.id,
            "application_id": self.application_id,
            "system_id": self.system_id,
            "interviewer_id": self.interviewer_id,
            "scheduled_at": self.scheduled_at.isoformat(),
            "duration": self.duration,
            "status": self.status.value,
            "location": self.location,
            "notes": self.notes,
            "created_by_id": self.created_by_id,
        }

    def __repr__(self) -> str:
        return f"<Interview id={self.id} application_id={self.application_id} system_id={self.system_id}>"


class InterviewNote(db.Model, TimestampMixin):
    __tablename__ = "interview_notes"
    id = db.Column(db.Integer, primary_key=True)
    interview_id = db.Column(db.Integer, db.ForeignKey("interviews.id", ondelete="CASCADE"), nullable=False, index=True)
    note = db.Column(db.Text, nullable=False)
    created_by_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "interview_id": self.interview_id,
            "note": self.note,
            "created_by_id": self.created_by_id,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
