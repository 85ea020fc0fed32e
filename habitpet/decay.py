"""
Passive, time-driven decay of the creature.

Three independently timed passes, each gated by its own "last applied"
timestamp on the snapshot:

- poop generation (every 24h)
- habit-linked health/happiness decay (checked every 12h)
- hourly background degradation (hunger, cleanliness, completion-rate
  adjustments and neglect penalties)

Every pass is a pure read-modify-write that advances its timestamp together
with the stat change. Re-running a pass on its own output with the same
``now`` is a no-op, so a retried pass never applies twice as long as the
host persists snapshot and timestamp together.

None of the passes run while the creature is passed out.
"""

from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Sequence, Tuple

from .constants import (
    BASE_HAPPINESS_LOSS,
    BASE_HEALTH_LOSS,
    CLEANLINESS_GRACE_HOURS,
    COMPLETION_RATE_EFFECTS,
    DEGRADATION_INTERVAL_HOURS,
    HEALTH_DECAY_INTERVAL_HOURS,
    HUNGER_GRACE_HOURS,
    LOW_CLEANLINESS_PENALTY,
    LOW_HUNGER_PENALTY,
    LOW_STAT,
    MAX_HOURLY_CLEANLINESS_LOSS,
    MAX_HOURLY_HUNGER_LOSS,
    NO_HABITS_EFFECT,
    POOP_CLEANLINESS_PENALTY,
    POOP_INTERVAL_HOURS,
    RECENT_HABIT_WINDOW_HOURS,
    TOXIC_HAPPINESS_LOSS,
    TOXIC_HEALTH_LOSS,
    TOXIC_POOP_THRESHOLD,
)
from .lifecycle import health_updates, is_alive
from .schemas import (
    ActionKind,
    ActionLogEntry,
    CreatureSnapshot,
    HabitRecord,
    TransitionResult,
)
from .stats import clamp_poop, clamp_stat, evolve
from .streaks import completed_today
from .timeutils import elapsed_hours, fallback, whole_hours


# ----------------------------------------------------------------------------
# Poop generation
# ----------------------------------------------------------------------------

def poop_due(snapshot: CreatureSnapshot, now: datetime) -> bool:
    last = fallback(snapshot.last_poop_time, snapshot.created_at)
    return elapsed_hours(last, now) >= POOP_INTERVAL_HOURS


def generate_poop(snapshot: CreatureSnapshot, now: datetime) -> TransitionResult:
    """Drop one poop if a day has passed since the last one."""

    if not is_alive(snapshot) or not poop_due(snapshot, now):
        return TransitionResult(snapshot=snapshot)

    entry = ActionLogEntry.for_snapshot(
        snapshot,
        ActionKind.DECAY,
        now,
        poop_effect=1,
        cleanliness_effect=-POOP_CLEANLINESS_PENALTY,
        details={"poop": True},
    )
    updated = evolve(
        snapshot,
        now,
        poop_count=clamp_poop(snapshot.poop_count + 1),
        cleanliness=clamp_stat(snapshot.cleanliness - POOP_CLEANLINESS_PENALTY),
        last_poop_time=now,
    )
    return TransitionResult(snapshot=updated, log_entry=entry)


# ----------------------------------------------------------------------------
# Habit-linked health decay
# ----------------------------------------------------------------------------

def health_decay_due(snapshot: CreatureSnapshot, now: datetime) -> bool:
    last = fallback(snapshot.last_health_decay_time, snapshot.created_at)
    return elapsed_hours(last, now) >= HEALTH_DECAY_INTERVAL_HOURS


def has_recent_habit_activity(habits: Iterable[HabitRecord], now: datetime) -> bool:
    """True when any habit was completed within the trailing window."""

    return any(
        habit.last_completed_at is not None
        and elapsed_hours(habit.last_completed_at, now) <= RECENT_HABIT_WINDOW_HOURS
        for habit in habits
    )


def decay_amounts(poop_count: int) -> Tuple[int, int]:
    """(health loss, happiness loss), amplified in a toxic environment."""

    if poop_count >= TOXIC_POOP_THRESHOLD:
        return TOXIC_HEALTH_LOSS, TOXIC_HAPPINESS_LOSS
    return BASE_HEALTH_LOSS, BASE_HAPPINESS_LOSS


def apply_health_decay(
    snapshot: CreatureSnapshot,
    habits: Sequence[HabitRecord],
    now: datetime,
    *,
    poop_count: Optional[int] = None,
) -> TransitionResult:
    """Run the 12-hourly decay check.

    Recent habit activity suppresses the penalty; the timestamp advances
    either way so the check is not repeated until the next window.

    ``poop_count`` overrides the count used to pick base vs toxic amounts;
    it defaults to the snapshot's own count.
    """

    if not is_alive(snapshot) or not health_decay_due(snapshot, now):
        return TransitionResult(snapshot=snapshot)

    if has_recent_habit_activity(habits, now):
        return TransitionResult(
            snapshot=evolve(snapshot, now, last_health_decay_time=now)
        )

    if poop_count is None:
        poop_count = snapshot.poop_count
    health_loss, happiness_loss = decay_amounts(poop_count)
    toxic = poop_count >= TOXIC_POOP_THRESHOLD
    entry = ActionLogEntry.for_snapshot(
        snapshot,
        ActionKind.DECAY,
        now,
        health_effect=-health_loss,
        happiness_effect=-happiness_loss,
        details={"health_decay": "toxic" if toxic else "base"},
    )
    updated = evolve(
        snapshot,
        now,
        happiness=clamp_stat(snapshot.happiness - happiness_loss),
        last_health_decay_time=now,
        **health_updates(snapshot.health - health_loss),
    )
    return TransitionResult(snapshot=updated, log_entry=entry)


def _merge_entries(
    snapshot: CreatureSnapshot, entries: List[ActionLogEntry], now: datetime
) -> Optional[ActionLogEntry]:
    if not entries:
        return None
    effects = {
        name: sum(getattr(entry, name) for entry in entries)
        for name in (
            "health_effect",
            "happiness_effect",
            "cleanliness_effect",
            "hunger_effect",
            "food_effect",
            "poop_effect",
        )
    }
    details = {}
    for entry in entries:
        details.update(entry.details)
    return ActionLogEntry.for_snapshot(
        snapshot, ActionKind.DECAY, now, details=details, **effects
    )


def apply_automatic_updates(
    snapshot: CreatureSnapshot,
    habits: Sequence[HabitRecord],
    now: datetime,
) -> TransitionResult:
    """Poop generation followed by the health decay check.

    This is the pass a host runs whenever the creature is looked at. The two
    effects are merged into a single ``decay`` log entry.
    """

    entries: List[ActionLogEntry] = []

    pooped = generate_poop(snapshot, now)
    if pooped.log_entry is not None:
        entries.append(pooped.log_entry)

    # Toxicity is judged on the poop present before this pass
    decayed = apply_health_decay(
        pooped.snapshot, habits, now, poop_count=snapshot.poop_count
    )
    if decayed.log_entry is not None:
        entries.append(decayed.log_entry)

    return TransitionResult(
        snapshot=decayed.snapshot,
        log_entry=_merge_entries(snapshot, entries, now),
    )


# ----------------------------------------------------------------------------
# Hourly background degradation
# ----------------------------------------------------------------------------

def completion_rate(habits: Sequence[HabitRecord], now: datetime) -> Optional[float]:
    """Share of habits completed today, or None when no habits exist."""

    if not habits:
        return None
    done = sum(1 for habit in habits if completed_today(habit, now))
    return done / len(habits)


def completion_effect(habits: Sequence[HabitRecord], now: datetime) -> Tuple[int, int]:
    """(health change, happiness change) from today's completion ratio."""

    rate = completion_rate(habits, now)
    if rate is None:
        return NO_HABITS_EFFECT
    for threshold, health_change, happiness_change in COMPLETION_RATE_EFFECTS:
        if rate >= threshold:
            return health_change, happiness_change
    return COMPLETION_RATE_EFFECTS[-1][1:]


def degradation_due(snapshot: CreatureSnapshot, now: datetime) -> bool:
    last = fallback(snapshot.last_degradation_time, snapshot.created_at)
    return elapsed_hours(last, now) >= DEGRADATION_INTERVAL_HOURS


def hunger_loss(snapshot: CreatureSnapshot, now: datetime) -> int:
    hours = whole_hours(fallback(snapshot.last_fed, snapshot.created_at), now)
    if hours > HUNGER_GRACE_HOURS:
        return min(MAX_HOURLY_HUNGER_LOSS, hours - HUNGER_GRACE_HOURS)
    return 0


def cleanliness_loss(snapshot: CreatureSnapshot, now: datetime) -> int:
    hours = whole_hours(fallback(snapshot.last_cleaned, snapshot.created_at), now)
    if hours > CLEANLINESS_GRACE_HOURS:
        return min(MAX_HOURLY_CLEANLINESS_LOSS, hours - CLEANLINESS_GRACE_HOURS)
    return 0


def apply_hourly_degradation(
    snapshot: CreatureSnapshot,
    habits: Sequence[HabitRecord],
    now: datetime,
) -> TransitionResult:
    """One background degradation step.

    Neglect penalties are judged on the vitals before this step's changes.
    Only ``health <= 0`` passes the creature out; happiness plays no part.
    """

    if not is_alive(snapshot) or not degradation_due(snapshot, now):
        return TransitionResult(snapshot=snapshot)

    hunger_change = -hunger_loss(snapshot, now)
    cleanliness_change = -cleanliness_loss(snapshot, now)
    health_change, happiness_change = completion_effect(habits, now)
    poop_change = 0

    if snapshot.hunger < LOW_STAT:
        health_change += LOW_HUNGER_PENALTY[0]
        happiness_change += LOW_HUNGER_PENALTY[1]

    if snapshot.cleanliness < LOW_STAT:
        health_change += LOW_CLEANLINESS_PENALTY[0]
        happiness_change += LOW_CLEANLINESS_PENALTY[1]
        poop_change = 1

    entry = ActionLogEntry.for_snapshot(
        snapshot,
        ActionKind.DEGRADATION,
        now,
        health_effect=health_change,
        happiness_effect=happiness_change,
        cleanliness_effect=cleanliness_change,
        hunger_effect=hunger_change,
        poop_effect=poop_change,
        details={"completion_rate": completion_rate(habits, now)},
    )
    updated = evolve(
        snapshot,
        now,
        happiness=clamp_stat(snapshot.happiness + happiness_change),
        cleanliness=clamp_stat(snapshot.cleanliness + cleanliness_change),
        hunger=clamp_stat(snapshot.hunger + hunger_change),
        poop_count=clamp_poop(snapshot.poop_count + poop_change),
        last_degradation_time=now,
        **health_updates(snapshot.health + health_change),
    )
    # Logged only when health or happiness moved
    logged = health_change != 0 or happiness_change != 0
    return TransitionResult(snapshot=updated, log_entry=entry if logged else None)
