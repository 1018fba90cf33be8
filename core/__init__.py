# Owl - Core Module
"""
Core infrastructure for the Owl file browser.
Configuration and audit logging shared by the browser and the CLI.
"""

from .config import BrowserConfig
from .logger import AuditLogger, AuditEntry, ActionType, ActionStatus

__all__ = [
    "BrowserConfig",
    "AuditLogger",
    "AuditEntry",
    "ActionType",
    "ActionStatus",
]

__version__ = "0.1.0"
