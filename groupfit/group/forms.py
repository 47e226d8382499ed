"""Forms for the group blueprint."""

from wtforms.validators import DataRequired, NumberRange, Optional
from wtforms.validators import ValidationError as FieldValidationError

from groupfit.utils import ApiForm, JsonIntegerField, JsonStringField, ListField


class GroupForm(ApiForm):
    """Form for creating a new group together with its owner."""

    name = JsonStringField("Group Name", validators=[DataRequired("name is required.")])
    description = JsonStringField("Description")
    photoUrl = JsonStringField("Photo URL")
    goalRep = JsonIntegerField(
        "Goal",
        validators=[NumberRange(min=1, message="goalRep must be an integer of at least 1.")],
    )
    tags = ListField("Tags")
    discordWebhookUrl = JsonStringField("Discord Webhook URL")
    discordInviteUrl = JsonStringField("Discord Invite URL")
    ownerNickname = JsonStringField(
        "Owner Nickname", validators=[DataRequired("ownerNickname is required.")]
    )
    ownerPassword = JsonStringField(
        "Owner Password", validators=[DataRequired("ownerPassword is required.")]
    )


class GroupUpdateForm(ApiForm):
    """Form for a partial update of a group by its owner."""

    name = JsonStringField("Group Name")
    description = JsonStringField("Description")
    photoUrl = JsonStringField("Photo URL")
    goalRep = JsonIntegerField(
        "Goal",
        validators=[
            Optional(),
            NumberRange(min=1, message="goalRep must be an integer of at least 1."),
        ],
    )
    tags = ListField("Tags")
    discordWebhookUrl = JsonStringField("Discord Webhook URL")
    discordInviteUrl = JsonStringField("Discord Invite URL")
    ownerPassword = JsonStringField(
        "Owner Password", validators=[DataRequired("ownerPassword is required.")]
    )

    def validate_name(self, field):
        """Reject an explicitly blank name."""
        if field.raw_data and not str(field.data or "").strip():
            raise FieldValidationError("name cannot be empty.")

    def changed_fields(self, fields):
        """Return only the fields present in the submitted body."""
        return {
            name: getattr(self, name).data
            for name in fields
            if getattr(self, name).raw_data
        }


class OwnerPasswordForm(ApiForm):
    """Form confirming the owner's password before deleting a group."""

    ownerPassword = JsonStringField(
        "Owner Password", validators=[DataRequired("ownerPassword is required.")]
    )
