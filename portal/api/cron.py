# portal/api/cron.py
import hmac

from flask import Blueprint, current_app, jsonify, request

from ..errors import AuthenticationError
from ..services.stages import sweep

bp = Blueprint("cron", __name__)


def _check_secret():
    secret = current_app.config.get("CRON_SECRET")
    if not secret:
        return
    header = request.headers.get("Authorization", "")
    if not hmac.compare_digest(header, f"Bearer {secret}"):
        raise AuthenticationError("Invalid cron secret.")


@bp.route("/api/cron/sweep", methods=["GET"])
@bp.route("/api/update", methods=["GET"])
def run_sweep():
    _check_secret()
    result = sweep()
    current_app.logger.info("Cron sweep: cycles=%d transitions=%d failed=%s",
                            result.cycles, len(result.transitions), result.failed)
    return jsonify(result.to_dict()), (200 if result.ok else 500)
