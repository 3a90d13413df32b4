"""
Core module - Configuration, database, identity, and infrastructure.
"""

from mwalimu.core.config import Settings, get_settings, settings
from mwalimu.core.database import Base, BaseModel, Database

__all__ = [
    "Settings",
    "get_settings",
    "settings",
    "Base",
    "BaseModel",
    "Database",
]
