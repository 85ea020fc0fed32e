from datetime import datetime, timedelta, timezone

from habitpet.lifecycle import (
    LifeState,
    adjust_food,
    adjust_stat,
    force_faint,
    force_poop,
    health_updates,
    life_state,
    new_creature,
    reset_stats,
    revival_updates,
)
from habitpet.schemas import ActionKind, AnimationState, VitalStat


T0 = datetime(2025, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


def make_creature(**overrides):
    return new_creature("user-1", T0).model_copy(update=overrides)


def test_new_creature_starts_full():
    creature = new_creature("user-1", T0, name="Pixel", food_count=4)

    assert creature.user_id == "user-1"
    assert creature.name == "Pixel"
    assert creature.level == 1
    assert (creature.health, creature.happiness, creature.cleanliness, creature.hunger) == (
        100,
        100,
        100,
        100,
    )
    assert creature.food_count == 4
    assert creature.poop_count == 0
    assert creature.is_passed_out is False
    assert creature.current_animation == AnimationState.HAPPY
    assert creature.last_poop_time == T0
    assert creature.last_degradation_time == T0
    assert life_state(creature) == LifeState.ALIVE


def test_health_updates_pass_out_only_at_zero():
    assert health_updates(0) == {"health": 0, "is_passed_out": True}
    assert health_updates(-15) == {"health": 0, "is_passed_out": True}
    assert health_updates(1) == {"health": 1}


def test_revival_never_leaves_zero_health():
    assert revival_updates(0) == {"health": 1, "is_passed_out": False}
    assert revival_updates(30) == {"health": 30, "is_passed_out": False}


def test_adjust_health_to_zero_then_back_revives():
    creature = make_creature(health=40)

    fainted = adjust_stat(creature, VitalStat.HEALTH, -100, T0)
    assert fainted.snapshot.health == 0
    assert fainted.snapshot.is_passed_out is True
    assert life_state(fainted.snapshot) == LifeState.PASSED_OUT
    assert fainted.log_entry.action_type == ActionKind.DEV_ADJUSTMENT
    assert fainted.log_entry.health_effect == -100

    revived = adjust_stat(fainted.snapshot, VitalStat.HEALTH, 10, T0 + timedelta(minutes=1))
    assert revived.snapshot.health == 10
    assert revived.snapshot.is_passed_out is False


def test_adjusting_other_stats_never_revives():
    creature = make_creature(health=0, is_passed_out=True, happiness=10)

    result = adjust_stat(creature, "happiness", 50, T0)

    assert result.snapshot.happiness == 60
    assert result.snapshot.is_passed_out is True
    assert result.log_entry.happiness_effect == 50


def test_adjust_food_never_goes_negative():
    creature = make_creature(food_count=2)

    result = adjust_food(creature, -5, T0)

    assert result.snapshot.food_count == 0
    assert result.log_entry.food_effect == -5


def test_force_poop_ignores_poop_clock():
    creature = make_creature(cleanliness=50)

    result = force_poop(creature, T0 + timedelta(minutes=1))

    assert result.snapshot.poop_count == 1
    assert result.snapshot.cleanliness == 35


def test_force_faint():
    creature = make_creature()

    result = force_faint(creature, T0)

    assert result.snapshot.health == 0
    assert result.snapshot.happiness == 70
    assert result.snapshot.is_passed_out is True
    assert result.snapshot.current_animation == AnimationState.DEAD


def test_reset_stats_revives_and_restores():
    creature = make_creature(
        health=0, is_passed_out=True, happiness=5, hunger=5, cleanliness=5, poop_count=4, food_count=0
    )

    result = reset_stats(creature, T0)

    snapshot = result.snapshot
    assert snapshot.is_passed_out is False
    assert (snapshot.health, snapshot.happiness, snapshot.cleanliness, snapshot.hunger) == (
        100,
        100,
        100,
        100,
    )
    assert snapshot.poop_count == 0
    assert snapshot.food_count == 10
    assert result.log_entry.poop_effect == -4
