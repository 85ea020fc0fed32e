"""
Habit streaks and the rewards they earn.

Streaks count consecutive calendar days (not rolling 24h windows) in the
timezone of the ``now`` passed in. Completing a habit updates the habit,
grants food scaled by the streak, boosts the creature, and revives it if it
had passed out.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .constants import (
    FOOD_REWARD_LONG,
    FOOD_REWARD_LONG_STREAK,
    FOOD_REWARD_MEDIUM,
    FOOD_REWARD_MEDIUM_STREAK,
    FOOD_REWARD_SHORT,
    HABIT_BASE_HAPPINESS,
    HABIT_BASE_HEALTH,
    HABIT_MAX_STREAK_BONUS,
    HABIT_MIN_HAPPINESS,
    HABIT_MIN_HEALTH,
    HABIT_MIN_HUNGER,
    HABIT_REVIVAL_MIN_HEALTH,
)
from .errors import AlreadyCompletedError
from .lifecycle import revival_updates
from .schemas import (
    ActionKind,
    ActionLogEntry,
    CreatureSnapshot,
    HabitCompletionResult,
    HabitRecord,
)
from .stats import clamp_stat, evolve
from .timeutils import calendar_day, today, yesterday


def completed_today(habit: HabitRecord, now: datetime) -> bool:
    if habit.last_completed_at is None:
        return False
    return calendar_day(habit.last_completed_at, now) == today(now)


def next_streak(habit: HabitRecord, now: datetime) -> int:
    """Streak value after completing ``habit`` at ``now``.

    Continues only when the previous completion fell on yesterday's date;
    any longer gap (or no previous completion) restarts at 1.
    """

    if habit.last_completed_at is None:
        return 1
    if calendar_day(habit.last_completed_at, now) == yesterday(now):
        return habit.current_streak + 1
    return 1


def food_reward(streak: int) -> int:
    if streak >= FOOD_REWARD_LONG_STREAK:
        return FOOD_REWARD_LONG
    if streak >= FOOD_REWARD_MEDIUM_STREAK:
        return FOOD_REWARD_MEDIUM
    return FOOD_REWARD_SHORT


def streak_bonus(streak: int) -> int:
    return min(streak, HABIT_MAX_STREAK_BONUS)


def complete_habit(
    habit: HabitRecord,
    creature: Optional[CreatureSnapshot],
    now: datetime,
) -> HabitCompletionResult:
    """Mark ``habit`` done for today and reward the creature.

    Raises:
        AlreadyCompletedError: if the habit was already completed on today's
            calendar date. Neither the habit nor the creature changes.
    """

    if completed_today(habit, now):
        raise AlreadyCompletedError(habit.id)

    new_streak = next_streak(habit, now)
    updated_habit = habit.model_copy(
        update={
            "last_completed_at": now,
            "current_streak": new_streak,
            "longest_streak": max(habit.longest_streak, new_streak),
            "total_completions": habit.total_completions + 1,
        }
    )
    reward = food_reward(new_streak)
    bonus = streak_bonus(new_streak)

    if creature is None:
        return HabitCompletionResult(
            habit=updated_habit,
            new_streak=new_streak,
            food_reward=reward,
            streak_bonus=bonus,
        )

    # Floors apply after the clamped boost
    health = max(clamp_stat(creature.health + HABIT_BASE_HEALTH + bonus), HABIT_MIN_HEALTH)
    happiness = max(
        clamp_stat(creature.happiness + HABIT_BASE_HAPPINESS + bonus), HABIT_MIN_HAPPINESS
    )
    hunger = max(creature.hunger, HABIT_MIN_HUNGER)

    updates = {
        "health": health,
        "happiness": happiness,
        "hunger": hunger,
        "food_count": creature.food_count + reward,
    }
    revived = creature.is_passed_out
    if revived:
        updates.update(revival_updates(max(HABIT_REVIVAL_MIN_HEALTH, health)))

    entry = ActionLogEntry.for_snapshot(
        creature,
        ActionKind.HABIT_COMPLETION,
        now,
        health_effect=HABIT_BASE_HEALTH + bonus,
        happiness_effect=HABIT_BASE_HAPPINESS + bonus,
        hunger_effect=hunger - creature.hunger,
        food_effect=reward,
        details={"habit_id": habit.id, "streak": new_streak, "revived": revived},
    )
    return HabitCompletionResult(
        habit=updated_habit,
        snapshot=evolve(creature, now, **updates),
        log_entry=entry,
        new_streak=new_streak,
        food_reward=reward,
        streak_bonus=bonus,
        revived=revived,
    )
