"""
Delete archived tournaments whose retention window has passed.

Intended to run on a schedule (e.g. daily cron). Firebase credentials are
resolved the same way the web app resolves them.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Add the project root to the Python path to allow importing 'bracketeer'
project_root = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(project_root))

from firebase_admin import firestore  # noqa: E402

from bracketeer import create_app  # noqa: E402
from bracketeer.tournament.services import TournamentService  # noqa: E402


def main() -> int:
    app = create_app()
    with app.app_context():
        try:
            db = firestore.client()
        except ValueError as e:
            print(f"Firebase is not initialized: {e}")
            return 1
        pruned = TournamentService.prune_archived(db=db)

    if not pruned:
        print("No archived tournaments past their retention window.")
    for tournament_id in pruned:
        print(f"Pruned {tournament_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
