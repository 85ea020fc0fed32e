"""Tests for the CreatureRules dispatch surface and stat invariants."""

import itertools
from datetime import datetime, timedelta, timezone

import pytest

from habitpet.constants import MAX_POOP, STAT_MAX, STAT_MIN
from habitpet.errors import CreatureRuleError
from habitpet.lifecycle import new_creature
from habitpet.rules import CreatureRules, format_creature_summary
from habitpet.schemas import ActionKind, HabitRecord, TransitionResult


T0 = datetime(2025, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


def make_creature(**overrides):
    return new_creature("user-1", T0).model_copy(update=overrides)


def assert_in_bounds(snapshot):
    for value in (snapshot.health, snapshot.happiness, snapshot.cleanliness, snapshot.hunger):
        assert STAT_MIN <= value <= STAT_MAX
    assert 0 <= snapshot.poop_count <= MAX_POOP
    assert snapshot.food_count >= 0


def test_apply_action_dispatches_player_actions():
    rules = CreatureRules()
    creature = make_creature(food_count=1, hunger=10)

    result = rules.apply_action(ActionKind.FEED, creature, T0)

    assert result.snapshot.hunger == 30
    assert result.log_entry.action_type == ActionKind.FEED


def test_apply_action_accepts_string_kind():
    rules = CreatureRules()

    result = rules.apply_action("pet", make_creature(happiness=50), T0)

    assert result.snapshot.happiness == 65


def test_apply_action_rejects_non_player_kinds():
    rules = CreatureRules()

    with pytest.raises(ValueError):
        rules.apply_action(ActionKind.DECAY, make_creature(), T0)


def test_validate_action():
    rules = CreatureRules()
    hungry_no_food = make_creature(food_count=0)

    assert rules.validate_action(ActionKind.FEED, hungry_no_food, T0) is False
    assert rules.validate_action(ActionKind.CLEAN, hungry_no_food, T0) is True
    assert rules.validate_action(ActionKind.PET, make_creature(last_pet_time=T0), T0) is False


def test_subclass_can_freeze_decay():
    class FrozenRules(CreatureRules):
        def apply_tick(self, snapshot, habits, now):
            return TransitionResult(snapshot=snapshot)

    creature = make_creature()

    result = FrozenRules().apply_tick(creature, [], T0 + timedelta(days=5))

    assert result.snapshot == creature


def test_format_summary_mentions_name_and_state():
    summary = format_creature_summary(make_creature(name="Pixel", health=0, is_passed_out=True))

    assert summary.startswith("Pixel (passed out")
    assert "health=0" in summary


@pytest.mark.parametrize(
    "vital,poop,passed_out",
    list(itertools.product((0, 1, 29, 99, 100), (0, 4, 5), (False, True))),
)
def test_every_transition_keeps_stats_in_bounds(vital, poop, passed_out):
    rules = CreatureRules()
    creature = make_creature(
        health=vital,
        happiness=vital,
        cleanliness=vital,
        hunger=vital,
        poop_count=poop,
        food_count=1,
        is_passed_out=passed_out,
        last_fed=T0 - timedelta(days=2),
        last_cleaned=T0 - timedelta(days=2),
        last_poop_time=T0 - timedelta(days=2),
        last_health_decay_time=T0 - timedelta(days=2),
        last_degradation_time=T0 - timedelta(days=2),
    )
    habits = [
        HabitRecord(id="a", user_id="user-1", last_completed_at=T0 - timedelta(days=1), current_streak=20),
        HabitRecord(id="b", user_id="user-1"),
    ]
    now = T0 + timedelta(hours=1)

    for kind in (ActionKind.FEED, ActionKind.CLEAN, ActionKind.PET):
        try:
            assert_in_bounds(rules.apply_action(kind, creature, now).snapshot)
        except CreatureRuleError:
            pass

    completion = rules.complete_habit(habits[0], creature, now)
    assert_in_bounds(completion.snapshot)
    assert completion.snapshot.is_passed_out is False

    assert_in_bounds(rules.apply_tick(creature, habits, now).snapshot)
    assert_in_bounds(rules.apply_hourly_degradation(creature, habits, now).snapshot)
    assert_in_bounds(rules.force_poop(creature, now).snapshot)
    assert_in_bounds(rules.force_faint(creature, now).snapshot)
