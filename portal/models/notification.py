from ..extensions import db
from .base import TimestampMixin

class Notification(db.Model, TimestampMixin):
    __tablename__ = "notifications"
    id = db.Column(db.Integer, primary_key=True)
    application_id = db.Column(db.Integer, db.ForeignKey("applications.id", ondelete="SET NULL"), index=True)
    kind = db.Column(db.String(50))  # interview_booked/stage_update
    idempotency_key = db.Column(db.String(255), unique=True, nullable=False)
    sent_to = db.Column(db.String(255))
    subject = db.Column(db.String(255))
    body = db.Column(db.Text)
    status = db.Column(db.String(20))  # sent/failed/skipped
    provider_message_id = db.Column(db.String(255))
    error = db.Column(db.Text)
    sent_at = db.Column(db.DateTime)
