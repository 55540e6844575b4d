"""Custom exception classes for the bracket engine."""


class AppError(Exception):
    """Base application error class."""

    def __init__(self, message, status_code=400):
        """Initialize the error."""
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class ValidationError(AppError):
    """Raised when user input fails validation."""

    def __init__(self, message="Validation failed."):
        """Initialize the error."""
        super().__init__(message, 400)


class NotFoundError(AppError):
    """Raised when a tournament, season or other resource is not found."""

    def __init__(self, message="Resource not found."):
        """Initialize the error."""
        super().__init__(message, 404)


class MatchNotFoundError(NotFoundError):
    """Raised when a match id is absent from a tournament bracket."""

    def __init__(self, match_id):
        """Initialize the error."""
        super().__init__(f"Match {match_id} not found.")
        self.match_id = match_id


class TeamNotFoundError(NotFoundError):
    """Raised when a tournament team does not exist."""

    def __init__(self, team_id):
        """Initialize the error."""
        super().__init__(f"Team {team_id} not found.")
        self.team_id = team_id


class InvalidTransitionError(AppError):
    """Raised when a tournament status change is not a legal edge."""

    def __init__(self, from_status, to_status):
        """Initialize the error."""
        super().__init__(
            f"Invalid status transition: {from_status} -> {to_status}", 409
        )
        self.from_status = from_status
        self.to_status = to_status


class InvalidTicketError(AppError):
    """Raised when a ticket code is missing, expired or scoped elsewhere."""

    def __init__(self, message="Invalid or expired ticket."):
        """Initialize the error."""
        super().__init__(message, 403)


class NotAParticipantError(AppError):
    """Raised when a user reports a score for a match they are not in."""

    def __init__(self, user_id, match_id):
        """Initialize the error."""
        super().__init__(f"User {user_id} is not a player in match {match_id}.", 403)
        self.user_id = user_id
        self.match_id = match_id


class AlreadySubmittedError(AppError):
    """Raised when a player reports a second score for the same match."""

    def __init__(self, user_id, match_id):
        """Initialize the error."""
        super().__init__(
            f"User {user_id} already submitted a score for match {match_id}.", 409
        )
        self.user_id = user_id
        self.match_id = match_id
