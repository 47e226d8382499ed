"""Routes for the record blueprint."""

from firebase_admin import firestore
from flask import jsonify, request

from groupfit.core.constants import RECORD_ORDER_FIELDS
from groupfit.utils import json_formdata, parse_listing_args, validate_form

from . import bp
from .forms import RecordForm
from .services import RecordService


@bp.route("", methods=["GET"])
def list_records(group_id):
    """List a group's exercise records."""
    db = firestore.client()
    args = parse_listing_args(request.args, RECORD_ORDER_FIELDS)
    return jsonify(RecordService.list_records(db, group_id, **args))


@bp.route("", methods=["POST"])
def create_record(group_id):
    """Log a new exercise record."""
    form = validate_form(RecordForm(formdata=json_formdata()))
    db = firestore.client()
    record = RecordService.create_record(db, group_id, form.data)
    return jsonify(record), 201


@bp.route("/<string:record_id>", methods=["GET"])
def view_record(group_id, record_id):
    """Return a single exercise record."""
    db = firestore.client()
    return jsonify(RecordService.get_record(db, group_id, record_id))
