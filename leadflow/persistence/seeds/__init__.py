"""System default seed data."""
