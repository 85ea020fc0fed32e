"""Tests for calendar-day streaks, food rewards and habit completion."""

from datetime import datetime, timedelta, timezone

import pytest

from habitpet.errors import AlreadyCompletedError
from habitpet.lifecycle import new_creature
from habitpet.schemas import ActionKind, HabitRecord
from habitpet.streaks import complete_habit, food_reward, next_streak, streak_bonus


T0 = datetime(2025, 3, 10, 12, 0, 0, tzinfo=timezone.utc)


def make_creature(**overrides):
    return new_creature("user-1", T0 - timedelta(days=30)).model_copy(update=overrides)


def make_habit(**overrides):
    defaults = dict(id="habit-1", user_id="user-1", name="Read")
    defaults.update(overrides)
    return HabitRecord(**defaults)


@pytest.mark.parametrize(
    "streak,expected",
    [(1, 1), (2, 1), (3, 2), (6, 2), (7, 3), (30, 3)],
)
def test_food_reward_tiers(streak, expected):
    assert food_reward(streak) == expected


def test_streak_bonus_is_capped():
    assert streak_bonus(4) == 4
    assert streak_bonus(10) == 10
    assert streak_bonus(25) == 10


def test_streak_continues_from_yesterday_and_applies_floors():
    habit = make_habit(
        last_completed_at=T0 - timedelta(days=1),
        current_streak=6,
        longest_streak=6,
        total_completions=10,
    )
    creature = make_creature(health=20, happiness=10, hunger=10, food_count=0)

    result = complete_habit(habit, creature, T0)

    assert result.new_streak == 7
    assert result.food_reward == 3
    assert result.streak_bonus == 7
    assert result.habit.current_streak == 7
    assert result.habit.longest_streak == 7
    assert result.habit.total_completions == 11
    assert result.habit.last_completed_at == T0

    assert result.snapshot.health == 60
    assert result.snapshot.happiness == 70
    assert result.snapshot.hunger == 50
    assert result.snapshot.food_count == 3
    assert result.log_entry.action_type == ActionKind.HABIT_COMPLETION
    assert result.log_entry.food_effect == 3


def test_completion_boost_is_clamped():
    habit = make_habit(last_completed_at=T0 - timedelta(days=1), current_streak=6)
    creature = make_creature(health=90, happiness=95, hunger=80)

    result = complete_habit(habit, creature, T0)

    assert result.snapshot.health == 100
    assert result.snapshot.happiness == 100
    assert result.snapshot.hunger == 80


def test_streak_breaks_after_gap():
    habit = make_habit(
        last_completed_at=T0 - timedelta(days=3),
        current_streak=6,
        longest_streak=9,
    )

    result = complete_habit(habit, make_creature(), T0)

    assert result.new_streak == 1
    assert result.food_reward == 1
    assert result.habit.longest_streak == 9


def test_first_completion_starts_streak():
    assert next_streak(make_habit(), T0) == 1


def test_streak_uses_calendar_days_not_rolling_hours():
    just_before_midnight = datetime(2025, 3, 9, 23, 59, tzinfo=timezone.utc)
    just_after_midnight = datetime(2025, 3, 10, 0, 1, tzinfo=timezone.utc)
    habit = make_habit(last_completed_at=just_before_midnight, current_streak=2)
    assert next_streak(habit, just_after_midnight) == 3

    two_days_back = datetime(2025, 3, 8, 23, 0, tzinfo=timezone.utc)
    habit = make_habit(last_completed_at=two_days_back, current_streak=2)
    # Only 25.5 hours earlier, but two calendar days apart.
    assert next_streak(habit, datetime(2025, 3, 10, 0, 30, tzinfo=timezone.utc)) == 1


def test_calendar_day_follows_callers_timezone():
    eastern = timezone(timedelta(hours=-5))
    habit = make_habit(
        # 21:00 on the 9th in UTC-5
        last_completed_at=datetime(2025, 3, 10, 2, 0, tzinfo=timezone.utc),
        current_streak=4,
    )

    result = complete_habit(habit, None, datetime(2025, 3, 10, 10, 0, tzinfo=eastern))

    assert result.new_streak == 5


def test_second_completion_same_day_is_rejected():
    habit = make_habit()
    creature = make_creature()

    first = complete_habit(habit, creature, T0)

    with pytest.raises(AlreadyCompletedError):
        complete_habit(first.habit, first.snapshot, T0 + timedelta(hours=5))

    assert first.habit.total_completions == 1


def test_completion_revives_passed_out_creature():
    creature = make_creature(health=0, is_passed_out=True, happiness=0)

    result = complete_habit(make_habit(), creature, T0)

    assert result.revived is True
    assert result.snapshot.is_passed_out is False
    assert result.snapshot.health == 60
    assert result.log_entry.details["revived"] is True


def test_completion_without_creature_still_updates_habit():
    result = complete_habit(make_habit(current_streak=0), None, T0)

    assert result.snapshot is None
    assert result.log_entry is None
    assert result.habit.current_streak == 1
    assert result.food_reward == 1
