"""Bracket models, seeding and winner advancement."""
