"""Operational scripts (migrations)."""
