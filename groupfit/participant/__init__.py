"""The participant blueprint."""

from flask import Blueprint

bp = Blueprint("participant", __name__, url_prefix="/groups/<string:group_id>/participants")

from . import routes  # noqa: E402

__all__ = ["routes"]
