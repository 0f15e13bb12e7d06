"""Accessgate: account registration, credential verification, session tokens and role checks."""

__version__ = "0.1.0"
