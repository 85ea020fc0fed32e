"""Tests for clamping, derived animation, warnings and the snapshot schema."""

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from habitpet.lifecycle import new_creature
from habitpet.schemas import AnimationState, CreatureSnapshot
from habitpet.stats import (
    CreatureWarning,
    StreakTier,
    clamp_poop,
    clamp_stat,
    derive_animation,
    describe,
    evolve,
    streak_tier,
    urgent_warnings,
)


T0 = datetime(2025, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


def make_creature(**overrides):
    return new_creature("user-1", T0).model_copy(update=overrides)


def test_clamp_stat_bounds():
    assert clamp_stat(-5) == 0
    assert clamp_stat(0) == 0
    assert clamp_stat(55) == 55
    assert clamp_stat(140) == 100


def test_clamp_poop_bounds():
    assert clamp_poop(-1) == 0
    assert clamp_poop(3) == 3
    assert clamp_poop(9) == 5


def test_snapshot_rejects_out_of_range_values():
    with pytest.raises(ValidationError):
        CreatureSnapshot(user_id="u", health=101, created_at=T0, updated_at=T0)

    with pytest.raises(ValidationError):
        CreatureSnapshot(user_id="u", poop_count=6, created_at=T0, updated_at=T0)

    with pytest.raises(ValidationError):
        CreatureSnapshot(user_id="u", food_count=-1, created_at=T0, updated_at=T0)


@pytest.mark.parametrize(
    "overrides,expected",
    [
        ({"is_passed_out": True, "health": 0}, AnimationState.DEAD),
        ({"health": 25}, AnimationState.SICK),
        ({"happiness": 20}, AnimationState.SICK),
        ({"happiness": 90}, AnimationState.HAPPY),
        ({"happiness": 60, "hunger": 10}, AnimationState.HUNGRY),
        ({"happiness": 60}, AnimationState.IDLE),
    ],
)
def test_derive_animation(overrides, expected):
    assert derive_animation(make_creature(**overrides)) == expected


def test_evolve_clamps_and_refreshes_derived_fields():
    creature = make_creature()
    later = datetime(2025, 3, 11, tzinfo=timezone.utc)

    updated = evolve(creature, later, health=-20, poop_count=12, food_count=-3)

    assert updated.health == 0
    assert updated.poop_count == 5
    assert updated.food_count == 0
    assert updated.updated_at == later
    assert updated.current_animation == AnimationState.SICK
    assert creature.health == 100


def test_urgent_warnings_for_toxic_neglected_creature():
    creature = make_creature(poop_count=5, health=10, happiness=10, cleanliness=5, hunger=5)

    warnings = urgent_warnings(creature)

    assert warnings == [
        CreatureWarning.TOXIC,
        CreatureWarning.CRITICAL_HEALTH,
        CreatureWarning.VERY_SAD,
        CreatureWarning.FILTHY,
        CreatureWarning.STARVING,
    ]


def test_passed_out_warning_replaces_health_warning():
    creature = make_creature(health=0, is_passed_out=True, poop_count=4)

    warnings = urgent_warnings(creature)

    assert CreatureWarning.PASSED_OUT in warnings
    assert CreatureWarning.CRITICAL_HEALTH not in warnings
    assert CreatureWarning.MANY_POOPS not in warnings


def test_healthy_creature_has_no_warnings():
    status = describe(make_creature())

    assert status.warnings == []
    assert status.animation == AnimationState.HAPPY


@pytest.mark.parametrize(
    "streak,tier",
    [
        (0, StreakTier.SEEDLING),
        (2, StreakTier.SEEDLING),
        (3, StreakTier.SPARKLES),
        (7, StreakTier.FIRE),
        (14, StreakTier.GEM),
        (30, StreakTier.TROPHY),
    ],
)
def test_streak_tiers(streak, tier):
    assert streak_tier(streak) == tier
