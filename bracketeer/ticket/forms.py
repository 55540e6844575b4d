"""Forms for the ticket blueprint."""

from wtforms import IntegerField, StringField
from wtforms.validators import DataRequired, NumberRange, Optional

from bracketeer.core.forms import APIForm


class IssueTicketForm(APIForm):
    user_id = StringField("User", validators=[DataRequired()])
    competition_id = StringField("Competition", validators=[DataRequired()])
    round_id = StringField("Round", validators=[Optional()])
    match_id = StringField("Match", validators=[Optional()])
    ttl_minutes = IntegerField(
        "Lifetime (minutes)", validators=[Optional(), NumberRange(min=1)]
    )


class RevokeTicketForm(APIForm):
    competition_id = StringField("Competition", validators=[Optional()])
