"""Caretaker alert synchronization and notification service."""

__version__ = "0.1.0"
