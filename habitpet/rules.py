"""
CreatureRules: the single entry point hosts use to drive the engine.

The rules object bundles the pure transition functions (actions, streaks,
decay, lifecycle) behind one dispatch surface so a host can be given a
different rule set without changing its own code. Everything here is
deterministic: the same snapshot, habits and ``now`` always produce the same
result, and no method reads the clock or touches storage.

Key responsibilities:
- Apply player actions (feed, clean, pet) and habit completions
- Apply passive decay: the on-view pass and the hourly background pass
- Answer "would this action be accepted?" without raising

Subclass and override a method to change one rule; for example a test
harness can replace ``apply_tick`` to freeze decay.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from . import actions, decay, lifecycle, streaks
from .constants import INITIAL_FOOD_COUNT
from .errors import CreatureRuleError
from .schemas import (
    ActionKind,
    CreatureSnapshot,
    HabitCompletionResult,
    HabitRecord,
    TransitionResult,
    VitalStat,
)
from .stats import format_vitals


def format_creature_summary(snapshot: CreatureSnapshot) -> str:
    """Format a snapshot as a short human-readable line for console/logs.

    Example output:
    "Habito (alive, idle): health=80 happiness=65 cleanliness=40 hunger=70 food=3 poop=1"
    """

    state = lifecycle.life_state(snapshot).value.replace("_", " ")
    return (
        f"{snapshot.name} ({state}, {snapshot.current_animation.value}): "
        f"{format_vitals(snapshot)}"
    )


class CreatureRules:
    """Default rule set for the habit-driven creature."""

    def create_creature(
        self,
        user_id: str,
        now: datetime,
        *,
        name: str = "Habito",
        food_count: int = INITIAL_FOOD_COUNT,
    ) -> CreatureSnapshot:
        return lifecycle.new_creature(user_id, now, name=name, food_count=food_count)

    def apply_action(
        self, kind: ActionKind, snapshot: CreatureSnapshot, now: datetime
    ) -> TransitionResult:
        """Apply a player action.

        Raises:
            ValueError: if ``kind`` is not a player action
            CreatureRuleError: if the action is rejected
        """

        kind = ActionKind(kind)
        handler = actions.ACTIONS.get(kind)
        if handler is None:
            raise ValueError(f"'{kind.value}' is not a player action")
        return handler(snapshot, now)

    def validate_action(
        self, kind: ActionKind, snapshot: CreatureSnapshot, now: datetime
    ) -> bool:
        """Return True when ``apply_action`` would accept the action."""

        try:
            self.apply_action(kind, snapshot, now)
        except CreatureRuleError:
            return False
        return True

    def complete_habit(
        self,
        habit: HabitRecord,
        snapshot: Optional[CreatureSnapshot],
        now: datetime,
    ) -> HabitCompletionResult:
        return streaks.complete_habit(habit, snapshot, now)

    def apply_tick(
        self,
        snapshot: CreatureSnapshot,
        habits: Sequence[HabitRecord],
        now: datetime,
    ) -> TransitionResult:
        """Poop generation and habit-linked decay, as run on every view."""

        return decay.apply_automatic_updates(snapshot, habits, now)

    def apply_hourly_degradation(
        self,
        snapshot: CreatureSnapshot,
        habits: Sequence[HabitRecord],
        now: datetime,
    ) -> TransitionResult:
        return decay.apply_hourly_degradation(snapshot, habits, now)

    # Dev/test tooling ---------------------------------------------------------

    def adjust_stat(
        self, snapshot: CreatureSnapshot, stat: VitalStat, delta: int, now: datetime
    ) -> TransitionResult:
        return lifecycle.adjust_stat(snapshot, stat, delta, now)

    def adjust_food(self, snapshot: CreatureSnapshot, delta: int, now: datetime) -> TransitionResult:
        return lifecycle.adjust_food(snapshot, delta, now)

    def force_poop(self, snapshot: CreatureSnapshot, now: datetime) -> TransitionResult:
        return lifecycle.force_poop(snapshot, now)

    def force_faint(self, snapshot: CreatureSnapshot, now: datetime) -> TransitionResult:
        return lifecycle.force_faint(snapshot, now)

    def reset_stats(self, snapshot: CreatureSnapshot, now: datetime) -> TransitionResult:
        return lifecycle.reset_stats(snapshot, now)

    def format_summary(self, snapshot: CreatureSnapshot) -> str:
        """Return a printable summary line; override for custom labels."""

        return format_creature_summary(snapshot)
