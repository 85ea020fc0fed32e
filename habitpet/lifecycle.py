"""
Lifecycle state machine: alive vs passed out.

There are two states and no terminal one. A creature passes out the moment
a transition drives its health to 0 and wakes up only through a revival
path: feeding, completing a habit, or a dev/test adjustment. Ordinary stat
recovery never clears the flag.

This module also owns creation of a fresh creature and the dev/test
adjustments used by debug tooling.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional
from uuid import UUID, uuid4

from .constants import (
    INITIAL_CLEANLINESS,
    INITIAL_FOOD_COUNT,
    INITIAL_HAPPINESS,
    INITIAL_HEALTH,
    INITIAL_HUNGER,
    INITIAL_LEVEL,
    INITIAL_POOP_COUNT,
    POOP_CLEANLINESS_PENALTY,
    STAT_MIN,
)
from .schemas import (
    ActionKind,
    ActionLogEntry,
    CreatureSnapshot,
    TransitionResult,
    VitalStat,
)
from .stats import clamp_poop, clamp_stat, evolve


FAINT_HAPPINESS_PENALTY = 30


class LifeState(str, Enum):
    ALIVE = "alive"
    PASSED_OUT = "passed_out"


def life_state(snapshot: CreatureSnapshot) -> LifeState:
    return LifeState.PASSED_OUT if snapshot.is_passed_out else LifeState.ALIVE


def is_alive(snapshot: CreatureSnapshot) -> bool:
    return not snapshot.is_passed_out


def health_updates(health: int) -> Dict[str, Any]:
    """Updates for a new health value, passing out when it reaches 0.

    Never revives: a passed-out creature keeps its flag whatever ``health``
    is, so only the explicit revival helpers can clear it.
    """

    clamped = clamp_stat(health)
    updates: Dict[str, Any] = {"health": clamped}
    if clamped <= STAT_MIN:
        updates["is_passed_out"] = True
    return updates


def revival_updates(health: int) -> Dict[str, Any]:
    """Updates that bring a passed-out creature back with ``health``."""

    return {"health": max(1, clamp_stat(health)), "is_passed_out": False}


def new_creature(
    user_id: str,
    now: datetime,
    *,
    name: str = "Habito",
    food_count: int = INITIAL_FOOD_COUNT,
    creature_id: Optional[UUID] = None,
) -> CreatureSnapshot:
    """Build the initial snapshot for a user's first creature.

    Poop and decay clocks start at creation so a new creature does not
    immediately owe a day's worth of decay.
    """

    return evolve(
        CreatureSnapshot(
            id=creature_id or uuid4(),
            user_id=user_id,
            name=name,
            level=INITIAL_LEVEL,
            health=INITIAL_HEALTH,
            happiness=INITIAL_HAPPINESS,
            cleanliness=INITIAL_CLEANLINESS,
            hunger=INITIAL_HUNGER,
            food_count=max(0, food_count),
            poop_count=INITIAL_POOP_COUNT,
            created_at=now,
            updated_at=now,
            last_fed=now,
            last_cleaned=now,
            last_poop_time=now,
            last_health_decay_time=now,
            last_degradation_time=now,
        ),
        now,
    )


# ----------------------------------------------------------------------------
# Dev/test adjustments
# ----------------------------------------------------------------------------

def adjust_stat(
    snapshot: CreatureSnapshot, stat: VitalStat, delta: int, now: datetime
) -> TransitionResult:
    """Shift one vital by ``delta``.

    Health hitting 0 passes the creature out; raising the health of a
    passed-out creature above 0 revives it.
    """

    stat = VitalStat(stat)
    new_value = clamp_stat(snapshot.vital(stat) + delta)
    updates: Dict[str, Any] = {stat.value: new_value}
    if stat is VitalStat.HEALTH:
        if new_value <= STAT_MIN:
            updates["is_passed_out"] = True
        elif snapshot.is_passed_out:
            updates.update(revival_updates(new_value))

    entry = ActionLogEntry.for_snapshot(
        snapshot,
        ActionKind.DEV_ADJUSTMENT,
        now,
        details={"stat": stat.value},
        **{f"{stat.value}_effect": delta},
    )
    return TransitionResult(snapshot=evolve(snapshot, now, **updates), log_entry=entry)


def adjust_food(snapshot: CreatureSnapshot, delta: int, now: datetime) -> TransitionResult:
    entry = ActionLogEntry.for_snapshot(
        snapshot, ActionKind.DEV_ADJUSTMENT, now, food_effect=delta, details={"stat": "food"}
    )
    return TransitionResult(
        snapshot=evolve(snapshot, now, food_count=snapshot.food_count + delta),
        log_entry=entry,
    )


def force_poop(snapshot: CreatureSnapshot, now: datetime) -> TransitionResult:
    """Drop one poop immediately, regardless of the poop clock."""

    entry = ActionLogEntry.for_snapshot(
        snapshot,
        ActionKind.DEV_ADJUSTMENT,
        now,
        poop_effect=1,
        cleanliness_effect=-POOP_CLEANLINESS_PENALTY,
        details={"forced": "poop"},
    )
    updated = evolve(
        snapshot,
        now,
        poop_count=clamp_poop(snapshot.poop_count + 1),
        cleanliness=clamp_stat(snapshot.cleanliness - POOP_CLEANLINESS_PENALTY),
        last_poop_time=now,
    )
    return TransitionResult(snapshot=updated, log_entry=entry)


def force_faint(snapshot: CreatureSnapshot, now: datetime) -> TransitionResult:
    entry = ActionLogEntry.for_snapshot(
        snapshot,
        ActionKind.DEV_ADJUSTMENT,
        now,
        health_effect=-snapshot.health,
        happiness_effect=-FAINT_HAPPINESS_PENALTY,
        details={"forced": "faint"},
    )
    updated = evolve(
        snapshot,
        now,
        happiness=clamp_stat(snapshot.happiness - FAINT_HAPPINESS_PENALTY),
        **health_updates(0),
    )
    return TransitionResult(snapshot=updated, log_entry=entry)


def reset_stats(
    snapshot: CreatureSnapshot, now: datetime, *, food_count: int = INITIAL_FOOD_COUNT
) -> TransitionResult:
    """Restore initial vitals and resources; revives a passed-out creature."""

    entry = ActionLogEntry.for_snapshot(
        snapshot,
        ActionKind.DEV_ADJUSTMENT,
        now,
        health_effect=INITIAL_HEALTH - snapshot.health,
        happiness_effect=INITIAL_HAPPINESS - snapshot.happiness,
        cleanliness_effect=INITIAL_CLEANLINESS - snapshot.cleanliness,
        hunger_effect=INITIAL_HUNGER - snapshot.hunger,
        food_effect=food_count - snapshot.food_count,
        poop_effect=INITIAL_POOP_COUNT - snapshot.poop_count,
        details={"forced": "reset"},
    )
    updated = evolve(
        snapshot,
        now,
        health=INITIAL_HEALTH,
        happiness=INITIAL_HAPPINESS,
        cleanliness=INITIAL_CLEANLINESS,
        hunger=INITIAL_HUNGER,
        poop_count=INITIAL_POOP_COUNT,
        food_count=food_count,
        is_passed_out=False,
    )
    return TransitionResult(snapshot=updated, log_entry=entry)
