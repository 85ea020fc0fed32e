"""
habitpet - a habit-driven virtual pet simulation engine.

A creature's health, happiness, cleanliness and hunger respond to player
actions (feed, clean, pet) and decay over time unless its owner keeps up
their habits.

The engine is pure state-transition logic: snapshot + inputs + ``now`` in,
new snapshot + log entry out. No file I/O, no database, no clock reads.
Hosts drive it through CreatureService (or CreatureRules directly) and
inject their own persistence.
"""

__version__ = "0.1.0"

# Engine entry point
from .rules import CreatureRules, format_creature_summary

# Host components
from .service import CreatureService
from .scheduler import DegradationScheduler
from .persistence import PersistenceStrategy, InMemoryPersistence, JsonPersistence
from .config import Config

# Rule functions
from .actions import feed, clean, pet, pet_cooldown_remaining
from .streaks import complete_habit, food_reward, next_streak, streak_bonus
from .decay import (
    apply_automatic_updates,
    apply_health_decay,
    apply_hourly_degradation,
    generate_poop,
)
from .lifecycle import LifeState, life_state, new_creature
from .stats import (
    CreatureWarning,
    StreakTier,
    clamp_poop,
    clamp_stat,
    derive_animation,
    describe,
    streak_tier,
    urgent_warnings,
)

# Schemas
from .schemas import (
    ActionKind,
    ActionLogEntry,
    AnimationState,
    CreatureSnapshot,
    CreatureStatus,
    HabitCompletionResult,
    HabitRecord,
    TransitionResult,
    VitalStat,
)

# Errors
from .errors import (
    AlreadyCompletedError,
    CooldownError,
    CreatureExistsError,
    CreatureNotFoundError,
    CreatureRuleError,
    HabitNotFoundError,
    InsufficientResourceError,
    InvalidStateError,
    PersistenceError,
)

__all__ = [
    # Engine
    "CreatureRules",
    "format_creature_summary",
    # Host
    "CreatureService",
    "DegradationScheduler",
    "PersistenceStrategy",
    "InMemoryPersistence",
    "JsonPersistence",
    "Config",
    # Rule functions
    "feed",
    "clean",
    "pet",
    "pet_cooldown_remaining",
    "complete_habit",
    "food_reward",
    "next_streak",
    "streak_bonus",
    "apply_automatic_updates",
    "apply_health_decay",
    "apply_hourly_degradation",
    "generate_poop",
    "LifeState",
    "life_state",
    "new_creature",
    "CreatureWarning",
    "StreakTier",
    "clamp_poop",
    "clamp_stat",
    "derive_animation",
    "describe",
    "streak_tier",
    "urgent_warnings",
    # Schemas
    "ActionKind",
    "ActionLogEntry",
    "AnimationState",
    "CreatureSnapshot",
    "CreatureStatus",
    "HabitCompletionResult",
    "HabitRecord",
    "TransitionResult",
    "VitalStat",
    # Errors
    "AlreadyCompletedError",
    "CooldownError",
    "CreatureExistsError",
    "CreatureNotFoundError",
    "CreatureRuleError",
    "HabitNotFoundError",
    "InsufficientResourceError",
    "InvalidStateError",
    "PersistenceError",
]
