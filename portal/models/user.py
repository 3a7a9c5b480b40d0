from ..extensions import db
from flask_login import UserMixin
from .base import TimestampMixin, enum_type
from .enums import Role
from werkzeug.security import generate_password_hash, check_password_hash

class User(db.Model, UserMixin, TimestampMixin):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    name = db.Column(db.String(255))
    password_hash = db.Column(db.String(255))
    role = db.Column(enum_type(Role), nullable=False, default=Role.APPLICANT)
    team_id = db.Column(db.Integer, db.ForeignKey("teams.id", ondelete="SET NULL"), index=True)
    system_id = db.Column(db.Integer, db.ForeignKey("systems.id", ondelete="SET NULL"), index=True)

    def set_password(self, raw):
        self.password_hash = generate_password_hash(raw)

    def check_password(self, raw):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, raw)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "role": self.role.value if self.role else None,
            "team_id": self.team_id,
            "system_id": self.system_id,
        }

    def __repr__(self) -> str:
        return f"<User id={self.id} role={self.role}>"
