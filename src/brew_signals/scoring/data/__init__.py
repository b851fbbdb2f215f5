"""Versioned scoring rule data."""
