from flask import Blueprint

bp = Blueprint("cycles", __name__)

from . import routes  # noqa: E402,F401
