"""Forms for the teams blueprint."""

from wtforms import SelectField, StringField
from wtforms.validators import DataRequired, Optional

from bracketeer.core.forms import APIForm

from .models import TEAM_ROLES


class TeamForm(APIForm):
    """Form to register a team."""

    team_name = StringField("Team Name", validators=[DataRequired()])
    team_tag = StringField("Team Tag", validators=[Optional()])


class MemberForm(APIForm):
    player_id = StringField("Player", validators=[DataRequired()])
    player_name = StringField("Player Name", validators=[Optional()])
    player_tag = StringField("Player Tag", validators=[Optional()])
    role = SelectField(
        "Role",
        choices=[(role, role) for role in TEAM_ROLES],
        default="member",
    )
