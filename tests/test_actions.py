"""Tests for the feed / clean / pet player actions."""

from datetime import datetime, timedelta, timezone

import pytest

from habitpet.actions import clean, feed, pet, pet_cooldown_remaining
from habitpet.errors import CooldownError, InsufficientResourceError, InvalidStateError
from habitpet.lifecycle import new_creature
from habitpet.schemas import ActionKind, AnimationState


T0 = datetime(2025, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


def make_creature(**overrides):
    creature = new_creature("user-1", T0)
    return creature.model_copy(update=overrides)


def test_feed_without_food_is_rejected():
    creature = make_creature(food_count=0, hunger=40)

    with pytest.raises(InsufficientResourceError) as excinfo:
        feed(creature, T0)

    assert excinfo.value.resource == "food"
    assert creature.food_count == 0
    assert creature.hunger == 40


def test_feed_boosts_hunger_and_happiness_but_not_health():
    creature = make_creature(food_count=3, hunger=50, happiness=40, health=55)

    result = feed(creature, T0 + timedelta(minutes=1))

    assert result.snapshot.hunger == 70
    assert result.snapshot.happiness == 50
    assert result.snapshot.health == 55
    assert result.snapshot.food_count == 2
    assert result.snapshot.last_fed == T0 + timedelta(minutes=1)
    assert result.log_entry.action_type == ActionKind.FEED
    assert result.log_entry.health_effect == 0
    assert result.log_entry.food_effect == -1


def test_feed_revives_passed_out_creature():
    creature = make_creature(health=0, is_passed_out=True, food_count=1, hunger=50, happiness=40)

    result = feed(creature, T0)

    assert result.snapshot.is_passed_out is False
    assert result.snapshot.health == 30
    assert result.snapshot.food_count == 0
    assert result.snapshot.current_animation == AnimationState.IDLE
    assert result.log_entry.action_type == ActionKind.REVIVAL_FEEDING
    assert result.log_entry.health_effect == 30


def test_feed_logs_raw_delta_even_when_clamped():
    creature = make_creature(food_count=1, hunger=95)

    result = feed(creature, T0)

    assert result.snapshot.hunger == 100
    assert result.log_entry.hunger_effect == 20


def test_clean_with_poop_grants_bonus_and_clears_poop():
    creature = make_creature(cleanliness=40, happiness=50, poop_count=3)

    result = clean(creature, T0)

    assert result.snapshot.cleanliness == 90
    assert result.snapshot.happiness == 75
    assert result.snapshot.poop_count == 0
    assert result.snapshot.last_cleaned == T0
    assert result.log_entry.cleanliness_effect == 50
    assert result.log_entry.happiness_effect == 25
    assert result.log_entry.poop_effect == -3


def test_clean_without_poop_uses_base_boost():
    creature = make_creature(cleanliness=50, happiness=50, poop_count=0)

    result = clean(creature, T0)

    assert result.snapshot.cleanliness == 80
    assert result.snapshot.happiness == 65
    assert result.log_entry.cleanliness_effect == 30


def test_clean_rejected_while_passed_out():
    creature = make_creature(health=0, is_passed_out=True, poop_count=2)

    with pytest.raises(InvalidStateError):
        clean(creature, T0)


def test_pet_respects_cooldown():
    creature = make_creature(happiness=50, health=50)

    first = pet(creature, T0)
    assert first.snapshot.happiness == 65
    assert first.snapshot.health == 55
    assert first.snapshot.last_pet_time == T0

    with pytest.raises(CooldownError) as excinfo:
        pet(first.snapshot, T0 + timedelta(minutes=4))
    assert excinfo.value.remaining_seconds == 60

    second = pet(first.snapshot, T0 + timedelta(minutes=5, seconds=1))
    assert second.snapshot.happiness == 80
    assert second.snapshot.health == 60


def test_pet_cooldown_remaining_rounds_up():
    creature = make_creature(last_pet_time=T0)

    assert pet_cooldown_remaining(creature, T0 + timedelta(seconds=299, milliseconds=500)) == 1
    assert pet_cooldown_remaining(creature, T0 + timedelta(minutes=5)) == 0
    assert pet_cooldown_remaining(make_creature(), T0) == 0


def test_pet_rejected_while_passed_out():
    creature = make_creature(health=0, is_passed_out=True)

    with pytest.raises(InvalidStateError):
        pet(creature, T0)


def test_actions_do_not_mutate_input_snapshot():
    creature = make_creature(food_count=2, hunger=10)

    feed(creature, T0)

    assert creature.food_count == 2
    assert creature.hunger == 10
