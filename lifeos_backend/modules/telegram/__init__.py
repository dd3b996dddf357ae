"""Telegram bot module for Life OS.

Validates bot commands and forwards messages to the n8n message workflow.
"""

from .commands import parse_command, validate_arguments
from .routers import router
from .services import handle_update

__all__ = ["handle_update", "parse_command", "validate_arguments", "router"]
