"""Utilities: logging setup, turn log, turn-log export."""
