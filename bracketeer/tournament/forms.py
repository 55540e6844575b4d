"""Forms for the tournament blueprint."""

from wtforms import SelectField, StringField
from wtforms.validators import AnyOf, DataRequired, Optional

from bracketeer.bracket.models import MatchStatus
from bracketeer.core.forms import APIForm

from .models import TournamentStatus, TournamentType


class TournamentForm(APIForm):
    """Form for creating a draft tournament."""

    name = StringField("Name", validators=[DataRequired()])
    game = StringField("Game", validators=[Optional()])
    tournament_type = SelectField(
        "Format",
        choices=[(t.value, t.value) for t in TournamentType],
        default=TournamentType.SINGLE_ELIM.value,
        validators=[Optional()],
    )
    description = StringField("Description", validators=[Optional()])
    season_id = StringField("Season", validators=[Optional()])


class StatusForm(APIForm):
    status = SelectField(
        "Status",
        choices=[(s.value, s.value) for s in TournamentStatus],
        validators=[DataRequired()],
    )


class ParticipantForm(APIForm):
    """Defaults to the logged-in user when no participant is named."""

    participant_id = StringField("Participant", validators=[Optional()])


class MatchResultForm(APIForm):
    """Form for an administrative match result."""

    winner = StringField("Winner", validators=[DataRequired()])
    loser = StringField("Loser", validators=[Optional()])
    stream_link = StringField("Stream Link", validators=[Optional()])
    status = StringField(
        "Status",
        validators=[
            Optional(),
            AnyOf([MatchStatus.COMPLETED.value, MatchStatus.DISPUTED.value]),
        ],
    )
