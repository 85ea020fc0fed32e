"""Logging utilities for habitpet hosts.

Provides color-coded output to distinguish rule passes, player actions,
rejections and failures. The engine modules never log; the service and the
scheduler do.
"""

import os
from enum import Enum

from .config import Config


class Color(Enum):
    """ANSI color codes for terminal output."""

    # Colors for operation types
    BLUE = "\033[94m"      # Passive rule passes (decay, degradation)
    YELLOW = "\033[93m"    # Rejections (cooldown, no food, ...)
    RED = "\033[91m"       # Errors and retries
    GREEN = "\033[92m"     # Success/completion
    CYAN = "\033[96m"      # Info/metadata

    RESET = "\033[0m"


def colored(text: str, color: Color) -> str:
    """Wrap text in ANSI color codes if colors are enabled.

    Args:
        text: Text to colorize
        color: Color to apply

    Returns:
        Colorized text if HABITPET_NO_COLOR is not set, otherwise plain text
    """
    if os.getenv("HABITPET_NO_COLOR"):
        return text

    return f"{color.value}{text}{Color.RESET.value}"


def log_deterministic(message: str) -> None:
    """Log a passive rule pass (blue)."""
    print(colored(f"{LOG_TAG_DETERMINISTIC} {message}", Color.BLUE))


def log_rejected(message: str) -> None:
    """Log a rejected player action (yellow)."""
    print(colored(f"{LOG_TAG_REJECTED} {message}", Color.YELLOW))


def log_error(message: str) -> None:
    """Log an error or retry (red)."""
    print(colored(f"{LOG_TAG_ERROR} {message}", Color.RED))


def log_success(message: str) -> None:
    """Log a success (green)."""
    print(colored(f"{LOG_TAG_SUCCESS} {message}", Color.GREEN))


def log_info(message: str) -> None:
    """Log metadata/info (cyan)."""
    print(colored(f"{LOG_TAG_INFO} {message}", Color.CYAN))


def log_verbose(message: str) -> None:
    """Log detail only when HABITPET_VERBOSE is enabled."""
    if Config.VERBOSE:
        log_info(message)


# Markers for operation types (color-blind accessible)
LOG_TAG_DETERMINISTIC = "[•]"  # Passive rule pass
LOG_TAG_REJECTED = "[~]"       # Rejected action
LOG_TAG_ERROR = "[!]"          # Error/retry
LOG_TAG_SUCCESS = "[✓]"        # Success
LOG_TAG_INFO = "[i]"           # Information
