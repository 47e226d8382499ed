"""Routes for the group blueprint."""

from firebase_admin import firestore
from flask import current_app, jsonify, request

from groupfit.core.constants import DEFAULT_RANKING_DURATION, GROUP_ORDER_FIELDS
from groupfit.core.periods import get_range
from groupfit.utils import json_formdata, parse_listing_args, validate_form

from . import bp
from .forms import GroupForm, GroupUpdateForm, OwnerPasswordForm
from .models import EDITABLE_GROUP_FIELDS
from .services.group_service import GroupService
from .services.likes import LikeService
from .services.ranking import RankingService


@bp.route("", methods=["GET"])
def list_groups():
    """List groups with search, ordering and pagination."""
    db = firestore.client()
    args = parse_listing_args(request.args, GROUP_ORDER_FIELDS)
    return jsonify(GroupService.list_groups(db, **args))


@bp.route("", methods=["POST"])
def create_group():
    """Create a new group and its owner participant."""
    form = validate_form(GroupForm(formdata=json_formdata()))
    db = firestore.client()
    group = GroupService.create_group(db, form.data)
    return jsonify(group), 201


@bp.route("/<string:group_id>", methods=["GET"])
def view_group(group_id):
    """Return a single group with its owner and participants."""
    db = firestore.client()
    return jsonify(GroupService.get_group_detail(db, group_id))


@bp.route("/<string:group_id>", methods=["PATCH"])
def edit_group(group_id):
    """Update a group's editable fields. Requires the owner's password."""
    form = validate_form(GroupUpdateForm(formdata=json_formdata()))
    db = firestore.client()
    group = GroupService.update_group(
        db,
        group_id,
        form.ownerPassword.data,
        form.changed_fields(EDITABLE_GROUP_FIELDS),
    )
    return jsonify(group)


@bp.route("/<string:group_id>", methods=["DELETE"])
def delete_group(group_id):
    """Delete a group. Requires the owner's password."""
    form = validate_form(OwnerPasswordForm(formdata=json_formdata()))
    db = firestore.client()
    GroupService.delete_group(db, group_id, form.ownerPassword.data)
    return "", 204


@bp.route("/<string:group_id>/likes", methods=["POST"])
def like_group(group_id):
    """Add a like to a group."""
    db = firestore.client()
    LikeService.increment_like(db, group_id)
    return "", 204


@bp.route("/<string:group_id>/likes", methods=["DELETE"])
def unlike_group(group_id):
    """Remove a like from a group."""
    db = firestore.client()
    LikeService.decrement_like(db, group_id)
    return "", 204


@bp.route("/<string:group_id>/rank", methods=["GET"])
def group_ranking(group_id):
    """Return the weekly or monthly leaderboard of a group."""
    duration = request.args.get("duration") or DEFAULT_RANKING_DURATION
    window = get_range(duration, tz=current_app.config["RANKING_TIMEZONE"])
    db = firestore.client()
    ranking = RankingService.get_ranking(db, group_id, window.start, window.end)
    return jsonify(ranking)
