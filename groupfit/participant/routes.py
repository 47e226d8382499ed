"""Routes for the participant blueprint."""

from firebase_admin import firestore
from flask import jsonify

from groupfit.utils import json_formdata, validate_form

from . import bp
from .forms import ParticipantForm
from .services import ParticipantService


@bp.route("", methods=["POST"])
def join_group(group_id):
    """Register a new participant in a group."""
    form = validate_form(ParticipantForm(formdata=json_formdata()))
    db = firestore.client()
    participant = ParticipantService.join_group(
        db, group_id, form.nickname.data, form.password.data
    )
    return jsonify(participant), 201


@bp.route("", methods=["DELETE"])
def leave_group(group_id):
    """Remove a participant from a group."""
    form = validate_form(ParticipantForm(formdata=json_formdata()))
    db = firestore.client()
    ParticipantService.leave_group(db, group_id, form.nickname.data, form.password.data)
    return "", 204
