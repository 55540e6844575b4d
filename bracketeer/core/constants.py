"""Global constants for the bracket engine."""

# Collection names
TOURNAMENTS_COLLECTION = "tournaments"
TICKETS_COLLECTION = "tickets"
DISPUTES_COLLECTION = "matchDisputes"
TEAMS_COLLECTION = "tournamentTeams"
SEASONS_COLLECTION = "tournamentSeasons"
AUDIT_LOGS_COLLECTION = "auditLogs"

# Ticket-related constants
TICKET_CODE_LENGTH = 8
TICKET_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
DEFAULT_TICKET_TTL_MINUTES = 120

# Archival
ARCHIVE_RETENTION_DAYS = 30

# Bracket match ids look like "{tournament_id}_R{round}_M{match}"
MATCH_ID_TEMPLATE = "{tournament_id}_R{round_number}_M{match_number}"
