from flask import Blueprint

bp = Blueprint("availabilities", __name__)

from . import routes  # noqa: E402,F401
