from ..extensions import db
from .base import TimestampMixin

class System(db.Model, TimestampMixin):
    __tablename__ = "systems"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(256), nullable=False, index=True)
    description = db.Column(db.Text)
    team_id = db.Column(db.Integer, db.ForeignKey("teams.id", ondelete="CASCADE"), nullable=False, index=True)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "description": self.description, "team_id": self.team_id}

    def __repr__(self) -> str:
        return f"<System id={self.id} name={self.name!r} team_id={self.team_id}>"
