"""Forms for the dispute blueprint."""

from wtforms import StringField
from wtforms.validators import DataRequired, Optional

from bracketeer.core.forms import APIForm


class DisputeForm(APIForm):
    """Form for contesting a match outcome."""

    match_id = StringField("Match", validators=[DataRequired()])
    tournament_id = StringField("Tournament", validators=[Optional()])
    reason = StringField("Reason", validators=[DataRequired()])
    description = StringField("Description", validators=[Optional()])


class ResolveDisputeForm(APIForm):
    resolution = StringField("Resolution", validators=[DataRequired()])
