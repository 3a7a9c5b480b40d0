from ..extensions import db
from .base import TimestampMixin, enum_type
from .enums import Stage

class ApplicationCycle(db.Model, TimestampMixin):
    __tablename__ = "application_cycles"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False, index=True)
    stage = db.Column(enum_type(Stage), nullable=False, default=Stage.PREPARATION)
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)

    def is_active(self, now):
        return self.start_date <= now <= self.end_date

    def to_dict(self, stages=None):
        out = {
            "id": self.id,
            "name": self.name,
            "stage": self.stage.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
        }
        if stages is not None:
            out["stages"] = [s.to_dict() for s in stages]
        return out


class CycleStage(db.Model, TimestampMixin):
    __tablename__ = "application_cycle_stages"
    id = db.Column(db.Integer, primary_key=True)
    cycle_id = db.Column(db.Integer, db.ForeignKey("application_cycles.id", ondelete="CASCADE"), nullable=False)
    stage = db.Column(enum_type(Stage), nullable=False)
    start_date = db.Column(db.DateTime, nullable=False)
    end_date = db.Column(db.DateTime, nullable=False)

    __table_args__ = (
        db.UniqueConstraint("cycle_id", "stage", name="uq_cycle_stage"),
        db.Index("ix_cycle_stage_dates", "cycle_id", "start_date", "end_date"),
    )

    def contains(self, now):
        return self.start_date <= now <= self.end_date

    def to_dict(self):
        return {
            "id": self.id,
            "cycle_id": self.cycle_id,
            "stage": self.stage.value,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
        }
