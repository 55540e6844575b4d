"""Forms for the match blueprint."""

from wtforms import FloatField, StringField, ValidationError
from wtforms.validators import DataRequired

from bracketeer.core.forms import APIForm


class ScoreForm(APIForm):
    """Form for a player-reported score."""

    ticket_code = StringField("Ticket", validators=[DataRequired()])
    # No InputRequired: a JSON score of 0 is falsy but valid.
    score = FloatField("Score")

    def validate_score(self, field):
        """Validate that a score was given and is not negative."""
        if field.data is None:
            raise ValidationError("A score is required.")
        if field.data < 0:
            raise ValidationError("Scores cannot be negative.")
