"""Configuration modules."""

from deckrag.configs.base import BaseSettings
from deckrag.configs.database import DatabaseSettings
from deckrag.configs.settings import Settings, get_settings
from deckrag.configs.vector_store import VectorStoreSettings

__all__ = [
    "BaseSettings",
    "DatabaseSettings",
    "Settings",
    "VectorStoreSettings",
    "get_settings",
]
