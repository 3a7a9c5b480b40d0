from ..extensions import db


class TimestampMixin:
    created_at = db.Column(db.DateTime, server_default=db.func.now())
    updated_at = db.Column(db.DateTime, server_default=db.func.now(), onupdate=db.func.now())


def enum_type(enum_cls):
    # stored as VARCHAR so migrations stay portable between SQLite and Postgres
    return db.Enum(enum_cls, native_enum=False, length=32, validate_strings=True)
