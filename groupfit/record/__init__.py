"""The record blueprint."""

from flask import Blueprint

bp = Blueprint("record", __name__, url_prefix="/groups/<string:group_id>/records")

from . import routes  # noqa: E402

__all__ = ["routes"]
