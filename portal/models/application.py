from ..extensions import db
from .base import TimestampMixin, enum_type
from .enums import ApplicationStatus, Stage

PREFERENCE_KEYS = ("system1", "system2", "system3")
PENDING_MARK = "PENDING"

class Application(db.Model, TimestampMixin):
    __tablename__ = "applications"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    team_id = db.Column(db.Integer, db.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)
    system_id = db.Column(db.Integer, db.ForeignKey("systems.id", ondelete="CASCADE"), index=True)
    application_cycle_id = db.Column(db.Integer, db.ForeignKey("application_cycles.id", ondelete="CASCADE"), nullable=False, index=True)
    status = db.Column(enum_type(ApplicationStatus), nullable=False, default=ApplicationStatus.SUBMITTED)
    internal_status = db.Column(enum_type(Stage), nullable=False, default=Stage.APPLICATION)
    internal_decision = db.Column(enum_type(ApplicationStatus))
    data = db.Column(db.JSON)  # answers, system1..system3 preferences, reviews

    def preferred_system_names(self):
        d = self.data or {}
        return [d.get(k) for k in PREFERENCE_KEYS if d.get(k)]

    def has_pending_review(self):
        reviews = (self.data or {}).get("reviews") or {}
        if not isinstance(reviews, dict):
            return False
        return any(str(mark).upper() == PENDING_MARK for mark in reviews.values())

    def to_dict(self, staff=False):
        out = {
            "id": self.id,
            "user_id": self.user_id,
            "team_id": self.team_id,
            "system_id": self.system_id,
            "application_cycle_id": self.application_cycle_id,
            "status": self.status.value,
            "internal_status": self.internal_status.value,
            "data": self.data or {},
        }
        if staff:
            out["internal_decision"] = self.internal_decision.value if self.internal_decision else None
        return out

    def __repr__(self) -> str:
        return f"<Application id={self.id} user_id={self.user_id} status={self.status}>"
