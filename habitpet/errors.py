"""
Exceptions raised by the creature engine and its host layer.

Rule errors are expected, recoverable rejections: the caller shows the
message to the user and nothing about the creature changes. Host errors
describe storage problems the engine itself never produces.
"""

import math
from typing import Optional


# =============================
# Engine rejections
# =============================

class CreatureRuleError(Exception):
    """Base class for every rejection produced by the engine."""

    code = "rule_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InsufficientResourceError(CreatureRuleError):
    """Raised when an action needs a resource the player does not have."""

    code = "insufficient_resource"

    def __init__(self, resource: str, message: Optional[str] = None) -> None:
        self.resource = resource
        super().__init__(
            message or f"No {resource} left! Complete habits to earn more {resource}."
        )


class InvalidStateError(CreatureRuleError):
    """Raised when the creature's lifecycle state forbids an action."""

    code = "invalid_state"

    def __init__(self, action: str, state: str, message: Optional[str] = None) -> None:
        self.action = action
        self.state = state
        super().__init__(
            message or f"Cannot {action} while the creature is {state}."
        )


class CooldownError(CreatureRuleError):
    """Raised when an action is attempted before its cooldown elapsed."""

    code = "cooldown"

    def __init__(self, action: str, remaining_seconds: int) -> None:
        self.action = action
        self.remaining_seconds = remaining_seconds
        minutes = max(1, math.ceil(remaining_seconds / 60))
        plural = "s" if minutes > 1 else ""
        super().__init__(
            f"Your pet is tired! Try to {action} again in {minutes} minute{plural}."
        )


class AlreadyCompletedError(CreatureRuleError):
    """Raised when a habit is completed twice on the same calendar day."""

    code = "already_completed"

    def __init__(self, habit_id: str) -> None:
        self.habit_id = habit_id
        super().__init__("You've already completed this habit today!")


# =============================
# Host errors
# =============================

class PersistenceError(Exception):
    """Raised by persistence backends when a write or read fails.

    The service retries commits that fail with this error.
    """


class CreatureNotFoundError(LookupError):
    """Raised when no creature exists for a user."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"No creature found for user {user_id}")


class CreatureExistsError(Exception):
    """Raised when inserting a second creature for the same user."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} already has a creature")


class HabitNotFoundError(LookupError):
    """Raised when a habit id is unknown to the store."""

    def __init__(self, habit_id: str) -> None:
        self.habit_id = habit_id
        super().__init__(f"Habit {habit_id} not found")
