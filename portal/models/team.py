from ..extensions import db
from .base import TimestampMixin

class Team(db.Model, TimestampMixin):
    __tablename__ = "teams"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(256), nullable=False, index=True)
    description = db.Column(db.Text)
    # applicants of this team may hold one interview per system applied to
    allows_multiple_system_interviews = db.Column(db.Boolean, nullable=False, default=False)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "allows_multiple_system_interviews": bool(self.allows_multiple_system_interviews),
        }

    def __repr__(self) -> str:
        return f"<Team id={self.id} name={self.name!r}>"
