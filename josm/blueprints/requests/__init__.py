from flask import Blueprint

requests_bp = Blueprint("requests", __name__, url_prefix="/material-requests")

from . import routes  # noqa: E402,F401
