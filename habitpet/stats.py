"""
Stat model helpers: clamping, derived display state and warnings.

Every transition in the engine routes its raw arithmetic through
``clamp_stat``/``clamp_poop`` and builds the resulting snapshot with
``evolve`` so no caller ever observes an out-of-range value.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, List

from .constants import (
    CRITICAL_STAT,
    HAPPY_THRESHOLD,
    LOW_STAT,
    MANY_POOPS,
    MAX_POOP,
    STAT_MAX,
    STAT_MIN,
    STREAK_TIER_FIRE,
    STREAK_TIER_GEM,
    STREAK_TIER_SPARKLES,
    STREAK_TIER_TROPHY,
    TOXIC_POOP_THRESHOLD,
)
from .schemas import AnimationState, CreatureSnapshot, CreatureStatus, VitalStat


VITAL_FIELDS = tuple(stat.value for stat in VitalStat)


def clamp_stat(value: int) -> int:
    """Clamp a vital to [STAT_MIN, STAT_MAX]."""

    return max(STAT_MIN, min(STAT_MAX, int(value)))


def clamp_poop(value: int) -> int:
    return max(0, min(MAX_POOP, int(value)))


def is_critical_stat(value: int) -> bool:
    return value < CRITICAL_STAT


def derive_animation(snapshot: CreatureSnapshot) -> AnimationState:
    """Pick the display state for a snapshot.

    Priority: passed out, then low health/happiness, then very happy, then
    hungry. Anything else idles.
    """

    if snapshot.is_passed_out:
        return AnimationState.DEAD
    if snapshot.health < LOW_STAT or snapshot.happiness < LOW_STAT:
        return AnimationState.SICK
    if snapshot.happiness > HAPPY_THRESHOLD:
        return AnimationState.HAPPY
    if snapshot.hunger < CRITICAL_STAT:
        return AnimationState.HUNGRY
    return AnimationState.IDLE


def evolve(snapshot: CreatureSnapshot, now: datetime, **updates: Any) -> CreatureSnapshot:
    """Return a copy of ``snapshot`` with ``updates`` applied.

    Vitals and poop are clamped here as a last line; rules clamp first so
    their log entries can compare clamped and raw values. ``updated_at`` and
    ``current_animation`` are refreshed on every call.
    """

    for key in VITAL_FIELDS:
        if key in updates:
            updates[key] = clamp_stat(updates[key])
    if "poop_count" in updates:
        updates["poop_count"] = clamp_poop(updates["poop_count"])
    if "food_count" in updates:
        updates["food_count"] = max(0, int(updates["food_count"]))

    updates["updated_at"] = now
    updated = snapshot.model_copy(update=updates)
    return updated.model_copy(update={"current_animation": derive_animation(updated)})


class CreatureWarning(str, Enum):
    """Urgent conditions worth surfacing to the player."""

    PASSED_OUT = "Pet has passed out! Feed or complete habits to revive!"
    TOXIC = "TOXIC! Too much poop is harming your pet!"
    MANY_POOPS = "Your pet is surrounded by poop!"
    CRITICAL_HEALTH = "Health critically low - risk of passing out!"
    VERY_SAD = "Pet is very sad!"
    FILTHY = "Pet is filthy!"
    STARVING = "Pet is starving!"


def urgent_warnings(snapshot: CreatureSnapshot) -> List[CreatureWarning]:
    warnings: List[CreatureWarning] = []
    if snapshot.is_passed_out:
        warnings.append(CreatureWarning.PASSED_OUT)
    elif snapshot.poop_count >= TOXIC_POOP_THRESHOLD:
        warnings.append(CreatureWarning.TOXIC)
    elif snapshot.poop_count >= MANY_POOPS:
        warnings.append(CreatureWarning.MANY_POOPS)

    if not snapshot.is_passed_out and is_critical_stat(snapshot.health):
        warnings.append(CreatureWarning.CRITICAL_HEALTH)
    if is_critical_stat(snapshot.happiness):
        warnings.append(CreatureWarning.VERY_SAD)
    if is_critical_stat(snapshot.cleanliness):
        warnings.append(CreatureWarning.FILTHY)
    if is_critical_stat(snapshot.hunger):
        warnings.append(CreatureWarning.STARVING)
    return warnings


def describe(snapshot: CreatureSnapshot) -> CreatureStatus:
    """Bundle a snapshot with its derived animation and warnings."""

    return CreatureStatus(
        snapshot=snapshot,
        animation=derive_animation(snapshot),
        warnings=[warning.value for warning in urgent_warnings(snapshot)],
    )


def format_vitals(snapshot: CreatureSnapshot) -> str:
    """One-line vitals summary used in log output."""

    return (
        f"health={snapshot.health} happiness={snapshot.happiness} "
        f"cleanliness={snapshot.cleanliness} hunger={snapshot.hunger} "
        f"food={snapshot.food_count} poop={snapshot.poop_count}"
        + (" [passed out]" if snapshot.is_passed_out else "")
    )


# ----------------------------------------------------------------------------
# Streak tiers
# ----------------------------------------------------------------------------

class StreakTier(str, Enum):
    SEEDLING = "seedling"
    SPARKLES = "sparkles"
    FIRE = "fire"
    GEM = "gem"
    TROPHY = "trophy"


STREAK_EMOJIS = {
    StreakTier.SEEDLING: "🌱",
    StreakTier.SPARKLES: "✨",
    StreakTier.FIRE: "🔥",
    StreakTier.GEM: "💎",
    StreakTier.TROPHY: "🏆",
}


def streak_tier(streak: int) -> StreakTier:
    if streak >= STREAK_TIER_TROPHY:
        return StreakTier.TROPHY
    if streak >= STREAK_TIER_GEM:
        return StreakTier.GEM
    if streak >= STREAK_TIER_FIRE:
        return StreakTier.FIRE
    if streak >= STREAK_TIER_SPARKLES:
        return StreakTier.SPARKLES
    return StreakTier.SEEDLING
