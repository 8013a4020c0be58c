"""Metadata indexes and listing filters."""
