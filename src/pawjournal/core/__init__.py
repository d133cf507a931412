"""Core plumbing: configuration, exceptions, logging."""

from .config import Config, get_config, reset_config
from .exceptions import (
    AssistantError,
    ConfigurationError,
    PawJournalError,
    PersistenceError,
)

__all__ = [
    "AssistantError",
    "Config",
    "ConfigurationError",
    "PawJournalError",
    "PersistenceError",
    "get_config",
    "reset_config",
]
