"""Configuration module."""

from lotledger.config.logging import configure_logging, get_logger, ledger_context
from lotledger.config.settings import Settings, get_settings, reset_settings

__all__ = [
    "Settings",
    "get_settings",
    "reset_settings",
    "configure_logging",
    "get_logger",
    "ledger_context",
]
