"""
Pydantic schemas for the habitpet simulation.

All data structures passed into and out of the engine are defined here.

Design Philosophy:
- Snapshots are treated as immutable: every transition returns a new copy
  built with ``model_copy(update=...)``
- Field constraints mirror the engine invariants (vitals in [0, 100], poop in
  [0, MAX_POOP]) so persisted data is re-validated when loaded
- Optional "last event" timestamps fall back to ``created_at``
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from .constants import MAX_POOP, STAT_MAX, STAT_MIN


# ============================================================================
# Enumerations
# ============================================================================

class ActionKind(str, Enum):
    """Kinds of log entries produced by the engine."""

    FEED = "feed"
    REVIVAL_FEEDING = "revival_feeding"
    CLEAN = "clean"
    PET = "pet"
    HABIT_COMPLETION = "habit_completion"
    DECAY = "decay"
    DEGRADATION = "degradation"
    DEV_ADJUSTMENT = "dev_adjustment"


class AnimationState(str, Enum):
    """Display label derived from the creature's vitals."""

    IDLE = "idle"
    HAPPY = "happy"
    HUNGRY = "hungry"
    SICK = "sick"
    DEAD = "dead"


class VitalStat(str, Enum):
    """Names of the four clamped vitals."""

    HEALTH = "health"
    HAPPINESS = "happiness"
    CLEANLINESS = "cleanliness"
    HUNGER = "hunger"


# ============================================================================
# Creature
# ============================================================================

class CreatureSnapshot(BaseModel):
    """Full state of one user's creature at a point in time.

    The host loads this from storage, hands it to an engine function together
    with ``now``, and persists whatever comes back. Engine functions never
    mutate the instance they receive.
    """

    id: UUID = Field(default_factory=uuid4, description="Creature identifier")
    user_id: str = Field(..., description="Owning user")
    name: str = Field("Habito", description="Display name")
    level: int = Field(1, ge=1, description="Display-only level")

    health: int = Field(100, ge=STAT_MIN, le=STAT_MAX)
    happiness: int = Field(100, ge=STAT_MIN, le=STAT_MAX)
    cleanliness: int = Field(100, ge=STAT_MIN, le=STAT_MAX)
    hunger: int = Field(100, ge=STAT_MIN, le=STAT_MAX, description="100 = full")

    food_count: int = Field(0, ge=0, description="Food available for feeding")
    poop_count: int = Field(0, ge=0, le=MAX_POOP)

    is_passed_out: bool = Field(False, description="True while health has hit 0")
    current_animation: AnimationState = Field(
        AnimationState.IDLE, description="Derived display state, not authoritative"
    )

    created_at: datetime
    updated_at: datetime
    last_fed: Optional[datetime] = None
    last_cleaned: Optional[datetime] = None
    last_pet_time: Optional[datetime] = None
    last_poop_time: Optional[datetime] = None
    last_health_decay_time: Optional[datetime] = None
    last_degradation_time: Optional[datetime] = None

    def vital(self, stat: VitalStat) -> int:
        """Return the current value of one vital by name."""

        return getattr(self, stat.value)


# ============================================================================
# Habits
# ============================================================================

class HabitRecord(BaseModel):
    """A habit tracked by the owning user.

    The engine reads habits to decide decay and returns an updated copy when a
    habit is completed. Everything else about habits (creation, deletion,
    naming) belongs to the host.
    """

    id: str = Field(default_factory=lambda: str(uuid4()))
    user_id: Optional[str] = None
    name: Optional[str] = None
    last_completed_at: Optional[datetime] = None
    current_streak: int = Field(0, ge=0)
    longest_streak: int = Field(0, ge=0)
    total_completions: int = Field(0, ge=0)
    created_at: Optional[datetime] = None


# ============================================================================
# Engine output
# ============================================================================

class ActionLogEntry(BaseModel):
    """Audit record for one action or decay pass.

    Effects hold the raw deltas the rule intended, before clamping, so the
    log shows what the rule asked for even when a stat was already capped.
    """

    id: UUID = Field(default_factory=uuid4)
    user_id: str
    creature_id: UUID
    action_type: ActionKind
    health_effect: int = 0
    happiness_effect: int = 0
    cleanliness_effect: int = 0
    hunger_effect: int = 0
    food_effect: int = 0
    poop_effect: int = 0
    created_at: datetime
    details: Dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def for_snapshot(
        cls,
        snapshot: CreatureSnapshot,
        action_type: ActionKind,
        now: datetime,
        **effects: Any,
    ) -> "ActionLogEntry":
        """Build an entry tagged with the snapshot's user and creature ids."""

        return cls(
            user_id=snapshot.user_id,
            creature_id=snapshot.id,
            action_type=action_type,
            created_at=now,
            **effects,
        )


class TransitionResult(BaseModel):
    """New snapshot plus the log entry to persist with it (if any)."""

    snapshot: CreatureSnapshot
    log_entry: Optional[ActionLogEntry] = None


class HabitCompletionResult(BaseModel):
    """Outcome of completing a habit.

    ``snapshot`` and ``log_entry`` are None when the user has no creature yet;
    the habit is still updated in that case.
    """

    habit: HabitRecord
    snapshot: Optional[CreatureSnapshot] = None
    log_entry: Optional[ActionLogEntry] = None
    new_streak: int
    food_reward: int
    streak_bonus: int
    revived: bool = False


class CreatureStatus(BaseModel):
    """Read-only summary handed to display layers."""

    snapshot: CreatureSnapshot
    animation: AnimationState
    warnings: List[str] = Field(default_factory=list)
