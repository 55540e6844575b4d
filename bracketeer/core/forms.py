"""Shared helpers for the JSON forms."""

from flask_wtf import FlaskForm  # type: ignore

from bracketeer.errors import ValidationError


class APIForm(FlaskForm):
    """Form bound to a JSON or form-encoded request body.

    The API blueprints are CSRF-exempt, so the token field is disabled here.
    """

    class Meta:
        csrf = False


def validated(form):
    """Return ``form`` if it validates, otherwise raise ValidationError."""
    if not form.validate_on_submit():
        messages = [
            f"{field}: {error}"
            for field, errors in form.errors.items()
            for error in errors
        ]
        raise ValidationError("; ".join(messages) or "Invalid request body.")
    return form
