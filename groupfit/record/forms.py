"""Forms for the record blueprint."""

from wtforms.validators import AnyOf, DataRequired, NumberRange
from wtforms.validators import ValidationError as FieldValidationError

from groupfit.core.constants import EXERCISE_TYPES, MAX_RECORD_PHOTOS
from groupfit.utils import (
    ApiForm,
    JsonIntegerField,
    JsonNumberField,
    JsonStringField,
    ListField,
)


class RecordForm(ApiForm):
    """Form for logging an exercise record."""

    exerciseType = JsonStringField(
        "Exercise Type",
        validators=[
            DataRequired("exerciseType is required."),
            AnyOf(
                EXERCISE_TYPES,
                message=f"exerciseType must be one of {', '.join(EXERCISE_TYPES)}.",
            ),
        ],
    )
    description = JsonStringField(
        "Description", validators=[DataRequired("description is required.")]
    )
    time = JsonIntegerField(
        "Time (seconds)",
        validators=[NumberRange(min=1, message="time must be a number greater than 0.")],
    )
    distance = JsonNumberField(
        "Distance (km)",
        validators=[NumberRange(min=0, message="distance must be a number of at least 0.")],
    )
    photos = ListField("Photos")
    authorNickname = JsonStringField(
        "Nickname", validators=[DataRequired("authorNickname is required.")]
    )
    authorPassword = JsonStringField(
        "Password", validators=[DataRequired("authorPassword is required.")]
    )

    def validate_photos(self, field):
        """Limit the number of attached photos."""
        if len(field.data or []) > MAX_RECORD_PHOTOS:
            raise FieldValidationError(
                f"photos may contain at most {MAX_RECORD_PHOTOS} items."
            )
