"""
habitpet Configuration

Loads host-side configuration from environment variables with sensible
defaults. Gameplay numbers live in ``habitpet.constants``; this class only
covers how the host runs the engine.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file if it exists
load_dotenv()


class Config:
    """Application configuration loaded from environment variables."""

    # Background degradation cadence (seconds between scheduler passes)
    DEGRADATION_INTERVAL_SECONDS: float = float(
        os.getenv("HABITPET_DEGRADATION_INTERVAL_SECONDS", "3600")
    )

    # Persistence
    DATA_DIR: Path = Path(os.getenv("HABITPET_DATA_DIR", "habitpet_data"))
    # Commit attempts before a persistence failure is surfaced to the caller
    PERSIST_MAX_ATTEMPTS: int = int(os.getenv("HABITPET_PERSIST_MAX_ATTEMPTS", "3"))

    # New creatures
    DEFAULT_CREATURE_NAME: str = os.getenv("HABITPET_DEFAULT_CREATURE_NAME", "Habito")
    INITIAL_FOOD: int = int(os.getenv("HABITPET_INITIAL_FOOD", "10"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    VERBOSE: bool = os.getenv("HABITPET_VERBOSE", "").lower() in ("1", "true", "yes")

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and raise errors for unusable values."""
        if cls.DEGRADATION_INTERVAL_SECONDS <= 0:
            raise ValueError(
                "HABITPET_DEGRADATION_INTERVAL_SECONDS must be positive "
                f"(got {cls.DEGRADATION_INTERVAL_SECONDS})"
            )

        if cls.PERSIST_MAX_ATTEMPTS < 1:
            raise ValueError(
                "HABITPET_PERSIST_MAX_ATTEMPTS must be at least 1 "
                f"(got {cls.PERSIST_MAX_ATTEMPTS})"
            )

        if cls.INITIAL_FOOD < 0:
            raise ValueError("HABITPET_INITIAL_FOOD cannot be negative")

    @classmethod
    def display(cls) -> str:
        """Return a formatted string showing current configuration."""
        lines = [
            "habitpet Configuration:",
            f"  Degradation Interval: {cls.DEGRADATION_INTERVAL_SECONDS:g}s",
            f"  Data Dir: {cls.DATA_DIR}",
            f"  Persist Attempts: {cls.PERSIST_MAX_ATTEMPTS}",
            f"  Default Name: {cls.DEFAULT_CREATURE_NAME}",
            f"  Initial Food: {cls.INITIAL_FOOD}",
            f"  Log Level: {cls.LOG_LEVEL}",
        ]
        return "\n".join(lines)
