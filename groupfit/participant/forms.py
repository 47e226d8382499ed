"""Forms for the participant blueprint."""

from wtforms.validators import DataRequired

from groupfit.utils import ApiForm, JsonStringField


class ParticipantForm(ApiForm):
    """Nickname/password pair used to join or leave a group."""

    nickname = JsonStringField("Nickname", validators=[DataRequired("nickname is required.")])
    password = JsonStringField("Password", validators=[DataRequired("password is required.")])
