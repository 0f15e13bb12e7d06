"""Core app configuration, database and security primitives."""

from accessgate.core.config import get_settings, settings
from accessgate.core.database import get_db

__all__ = ["get_settings", "settings", "get_db"]
