"""
Player actions: feed, clean and pet.

Each action takes the current snapshot and ``now`` and either returns a
``TransitionResult`` (new snapshot plus exactly one log entry) or raises a
``CreatureRuleError`` subclass. A rejected action leaves nothing changed
because nothing was built yet.
"""

from __future__ import annotations

import math
from datetime import datetime

from .constants import (
    CLEAN_CLEANLINESS_BOOST,
    CLEAN_HAPPINESS_BOOST,
    CLEAN_POOP_BONUS_CLEANLINESS,
    CLEAN_POOP_BONUS_HAPPINESS,
    FEED_HAPPINESS_BOOST,
    FEED_HUNGER_BOOST,
    FEED_REVIVAL_HEALTH,
    PET_COOLDOWN_SECONDS,
    PET_HAPPINESS_BOOST,
    PET_HEALTH_BOOST,
)
from .errors import CooldownError, InsufficientResourceError, InvalidStateError
from .lifecycle import LifeState, is_alive, revival_updates
from .schemas import ActionKind, ActionLogEntry, CreatureSnapshot, TransitionResult
from .stats import clamp_stat, evolve
from .timeutils import elapsed_seconds


def feed(snapshot: CreatureSnapshot, now: datetime) -> TransitionResult:
    """Spend one food to raise hunger and happiness.

    Feeding is also the quickest revival path: a passed-out creature wakes up
    with ``FEED_REVIVAL_HEALTH``. Feeding a living creature never touches
    health.
    """

    if snapshot.food_count <= 0:
        raise InsufficientResourceError("food")

    updates = {
        "hunger": clamp_stat(snapshot.hunger + FEED_HUNGER_BOOST),
        "happiness": clamp_stat(snapshot.happiness + FEED_HAPPINESS_BOOST),
        "food_count": snapshot.food_count - 1,
        "last_fed": now,
    }

    reviving = snapshot.is_passed_out
    if reviving:
        updates.update(revival_updates(FEED_REVIVAL_HEALTH))

    entry = ActionLogEntry.for_snapshot(
        snapshot,
        ActionKind.REVIVAL_FEEDING if reviving else ActionKind.FEED,
        now,
        hunger_effect=FEED_HUNGER_BOOST,
        happiness_effect=FEED_HAPPINESS_BOOST,
        health_effect=FEED_REVIVAL_HEALTH if reviving else 0,
        food_effect=-1,
    )
    return TransitionResult(snapshot=evolve(snapshot, now, **updates), log_entry=entry)


def clean(snapshot: CreatureSnapshot, now: datetime) -> TransitionResult:
    """Scrub the creature and clear all poop (bonus when there was some)."""

    if not is_alive(snapshot):
        raise InvalidStateError(
            "clean",
            LifeState.PASSED_OUT.value,
            "Your pet is passed out! Feed it to revive or complete habits to earn food.",
        )

    had_poop = snapshot.poop_count > 0
    cleanliness_delta = CLEAN_CLEANLINESS_BOOST + (CLEAN_POOP_BONUS_CLEANLINESS if had_poop else 0)
    happiness_delta = CLEAN_HAPPINESS_BOOST + (CLEAN_POOP_BONUS_HAPPINESS if had_poop else 0)

    entry = ActionLogEntry.for_snapshot(
        snapshot,
        ActionKind.CLEAN,
        now,
        cleanliness_effect=cleanliness_delta,
        happiness_effect=happiness_delta,
        poop_effect=-snapshot.poop_count,
    )
    updated = evolve(
        snapshot,
        now,
        cleanliness=clamp_stat(snapshot.cleanliness + cleanliness_delta),
        happiness=clamp_stat(snapshot.happiness + happiness_delta),
        poop_count=0,
        last_cleaned=now,
    )
    return TransitionResult(snapshot=updated, log_entry=entry)


def pet_cooldown_remaining(snapshot: CreatureSnapshot, now: datetime) -> int:
    """Whole seconds until petting is allowed again (0 when ready)."""

    if snapshot.last_pet_time is None:
        return 0
    remaining = PET_COOLDOWN_SECONDS - elapsed_seconds(snapshot.last_pet_time, now)
    return max(0, math.ceil(remaining))


def pet(snapshot: CreatureSnapshot, now: datetime) -> TransitionResult:
    """Give the creature attention; limited by a short cooldown."""

    if not is_alive(snapshot):
        raise InvalidStateError(
            "pet",
            LifeState.PASSED_OUT.value,
            "Your pet is passed out! Feed it to revive or complete habits to earn food.",
        )

    remaining = pet_cooldown_remaining(snapshot, now)
    if remaining > 0:
        raise CooldownError("pet", remaining)

    entry = ActionLogEntry.for_snapshot(
        snapshot,
        ActionKind.PET,
        now,
        happiness_effect=PET_HAPPINESS_BOOST,
        health_effect=PET_HEALTH_BOOST,
    )
    updated = evolve(
        snapshot,
        now,
        happiness=clamp_stat(snapshot.happiness + PET_HAPPINESS_BOOST),
        health=clamp_stat(snapshot.health + PET_HEALTH_BOOST),
        last_pet_time=now,
    )
    return TransitionResult(snapshot=updated, log_entry=entry)


ACTIONS = {
    ActionKind.FEED: feed,
    ActionKind.CLEAN: clean,
    ActionKind.PET: pet,
}
