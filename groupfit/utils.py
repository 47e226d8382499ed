"""Utility functions for the application."""

from __future__ import annotations

import datetime
import math
from typing import TYPE_CHECKING, Any

from flask import current_app, request
from flask_wtf import FlaskForm
from werkzeug.datastructures import ImmutableMultiDict
from wtforms import Field, FloatField, IntegerField, StringField
from wtforms.validators import StopValidation

from .core.constants import SORT_DIRECTIONS
from .errors import ValidationError

if TYPE_CHECKING:
    from google.cloud.firestore_v1.base_document import DocumentSnapshot

    from .core.types import PaginatedResponse


class ApiForm(FlaskForm):
    """Base form for JSON request bodies."""

    class Meta:
        csrf = False


# Each JSON value reaches a field as a single-item valuelist (see
# json_formdata), so the fields below see the value with its JSON type intact.


class JsonTypeMixin:
    """Stop validation at the type error when the value had the wrong JSON type."""

    def pre_validate(self, form):
        """Skip the validator chain for values that failed to process."""
        if self.process_errors:
            raise StopValidation()


class JsonStringField(JsonTypeMixin, StringField):
    """A string field that only accepts JSON strings."""

    def process_formdata(self, valuelist):
        """Reject anything that is not a string."""
        if not valuelist:
            return
        value = valuelist[0]
        if not isinstance(value, str):
            self.data = None
            raise ValueError(f"{self.name} must be a string.")
        self.data = value


class JsonIntegerField(JsonTypeMixin, IntegerField):
    """An integer field that only accepts whole JSON numbers."""

    def process_formdata(self, valuelist):
        """Reject booleans, strings and fractional numbers instead of coercing."""
        if not valuelist:
            return
        value = valuelist[0]
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, bool) or not isinstance(value, int):
            self.data = None
            raise ValueError(f"{self.name} must be an integer.")
        self.data = value


class JsonNumberField(JsonTypeMixin, FloatField):
    """A number field that only accepts JSON numbers."""

    def process_formdata(self, valuelist):
        """Reject booleans and strings instead of coercing."""
        if not valuelist:
            return
        value = valuelist[0]
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            self.data = None
            raise ValueError(f"{self.name} must be a number.")
        self.data = float(value)


class ListField(JsonTypeMixin, Field):
    """A field that only accepts a JSON array of strings."""

    def process_formdata(self, valuelist):
        """Store the submitted array."""
        if not valuelist:
            self.data = []
            return
        value = valuelist[0]
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            self.data = None
            raise ValueError(f"{self.name} must be an array of strings.")
        self.data = list(value)

    def _value(self):
        return self.data or []


def json_formdata() -> ImmutableMultiDict:
    """Wrap the JSON request body so WTForms can process it.

    Every value is kept as one entry, so arrays are not spread into
    multiple values. Null values are dropped so they behave like missing
    fields.
    """
    body = request.get_json(silent=True)
    if body is None:
        body = {}
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")
    return ImmutableMultiDict([(k, v) for k, v in body.items() if v is not None])


def validate_form(form: FlaskForm) -> FlaskForm:
    """Validate ``form`` and raise the first error as a ValidationError."""
    if form.validate():
        return form
    field_name, messages = next(iter(form.errors.items()))
    message = messages[0] if messages else "Invalid value."
    raise ValidationError(str(message), path=field_name)


def _serialize_value(value: Any) -> Any:
    if isinstance(value, datetime.datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {k: _serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_serialize_value(v) for v in value]
    return value


def serialize_document(
    doc: DocumentSnapshot, exclude: tuple[str, ...] = ()
) -> dict[str, Any]:
    """Convert a snapshot into a JSON-safe dict that includes its id."""
    data = doc.to_dict() or {}
    payload = {"id": doc.id}
    payload.update(
        {k: _serialize_value(v) for k, v in data.items() if k not in exclude}
    )
    return payload


def parse_positive_int(raw: str | None, name: str, default: int) -> int:
    """Parse a positive integer query parameter."""
    if raw is None or raw == "":
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        raise ValidationError(f"{name} must be an integer.", path=name) from None
    if value < 1:
        raise ValidationError(f"{name} must be at least 1.", path=name)
    return value


def parse_choice(raw: str | None, name: str, choices: tuple[str, ...], default: str) -> str:
    """Validate a query parameter against a fixed set of values."""
    if raw is None or raw == "":
        return default
    if raw not in choices:
        raise ValidationError(
            f"{name} must be one of {', '.join(choices)}.", path=name
        )
    return raw


def parse_listing_args(args: Any, order_fields: tuple[str, ...]) -> dict[str, Any]:
    """Extract page/limit/orderBy/order/search from request args."""
    max_page_size = current_app.config["MAX_PAGE_SIZE"]
    limit = parse_positive_int(
        args.get("limit"), "limit", current_app.config["DEFAULT_PAGE_SIZE"]
    )
    return {
        "page": parse_positive_int(args.get("page"), "page", 1),
        "limit": min(limit, max_page_size),
        "order_by": parse_choice(
            args.get("orderBy"), "orderBy", order_fields, order_fields[0]
        ),
        "order": parse_choice(args.get("order"), "order", SORT_DIRECTIONS, "desc"),
        "search": (args.get("search") or "").strip(),
    }


def paginate(items: list[Any], page: int, limit: int) -> PaginatedResponse:
    """Slice an already sorted list into a page with pagination metadata."""
    total = len(items)
    start = (page - 1) * limit
    return {
        "data": items[start : start + limit],
        "pagination": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit) if total else 0,
        },
    }


def sort_key(field: str):
    """Build a sort key that orders missing values first."""

    def key(item: dict[str, Any]) -> tuple[bool, Any]:
        value = item.get(field)
        return (value is not None, value if value is not None else 0)

    return key
