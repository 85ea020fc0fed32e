"""
Week Simulation - a habit tracker user and their creature
=========================================================

WHAT THIS SHOWS:
- Driving CreatureService with an explicit simulated clock
- Hourly degradation passes and the on-view decay check
- Habit completions feeding the creature (and reviving it)
- Player actions being rejected (no food, cooldown, passed out)
- Swapping InMemoryPersistence for JsonPersistence

RUN:
    python examples/week_simulation/run.py --days 7 --diligence 0.8
    python examples/week_simulation/run.py --diligence 0.0 --data-dir /tmp/habitpet
"""

import argparse
import asyncio
import random
from datetime import datetime, timedelta, timezone

from habitpet import (
    Config,
    CreatureRuleError,
    CreatureService,
    InMemoryPersistence,
    JsonPersistence,
    format_creature_summary,
    streak_tier,
)
from habitpet.stats import STREAK_EMOJIS

USER_ID = "demo-user"
HABIT_NAMES = ["Drink water", "Read 20 pages", "Stretch", "Walk outside", "Journal"]


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Simulate a week with a habit-driven creature")
    parser.add_argument("--days", type=int, default=7, help="Number of days to simulate")
    parser.add_argument("--habits", type=int, default=3, help="Number of habits to track (1-5)")
    parser.add_argument(
        "--diligence",
        type=float,
        default=0.7,
        help="Chance the user completes each habit on a given day (0-1)",
    )
    parser.add_argument("--seed", type=int, default=7, help="Random seed")
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Store state as JSON under this directory instead of in memory",
    )
    return parser.parse_args()


async def try_action(action) -> None:
    try:
        await action
    except CreatureRuleError:
        # Already logged by the service; the simulated user just moves on.
        pass


async def simulate_day(
    service: CreatureService,
    habit_ids: list,
    day_start: datetime,
    rng: random.Random,
    diligence: float,
) -> None:
    # Background job: one degradation pass per hour
    for hour in range(24):
        now = day_start + timedelta(hours=hour)

        if hour == 8:
            # Morning check-in: view the creature, then feed and pet it
            await service.check_for_updates(USER_ID, now)
            await try_action(service.feed(USER_ID, now))
            await try_action(service.pet(USER_ID, now))
            await try_action(service.pet(USER_ID, now + timedelta(minutes=2)))

        if hour == 19:
            await service.check_for_updates(USER_ID, now)
            for habit_id in habit_ids:
                if rng.random() < diligence:
                    await try_action(service.complete_habit(USER_ID, habit_id, now))
            creature = await service.get_creature(USER_ID)
            if creature.poop_count:
                await try_action(service.clean(USER_ID, now))

        await service.degrade(USER_ID, now)


async def main(args: argparse.Namespace) -> None:
    Config.validate()
    rng = random.Random(args.seed)
    persistence = JsonPersistence(args.data_dir) if args.data_dir else InMemoryPersistence()
    start = datetime(2025, 3, 10, tzinfo=timezone.utc)

    async with CreatureService(persistence, clock=lambda: start) as service:
        creature = await service.fetch_or_create(USER_ID, start)
        print(f"\nStarting: {format_creature_summary(creature)}\n")

        habit_ids = []
        for name in HABIT_NAMES[: max(1, min(args.habits, len(HABIT_NAMES)))]:
            habit = await service.create_habit(USER_ID, name, start)
            habit_ids.append(habit.id)

        for day in range(args.days):
            day_start = start + timedelta(days=day)
            print(f"\n=== Day {day + 1} ({day_start:%a %Y-%m-%d}) ===")
            await simulate_day(service, habit_ids, day_start, rng, args.diligence)

            status = await service.get_status(USER_ID)
            print(f"  End of day: {format_creature_summary(status.snapshot)}")
            for warning in status.warnings:
                print(f"  ! {warning}")

        print("\n=== Habits ===")
        for habit in await service.list_habits(USER_ID):
            tier = streak_tier(habit.current_streak)
            print(
                f"  {STREAK_EMOJIS[tier]} {habit.name}: streak {habit.current_streak} "
                f"(best {habit.longest_streak}, total {habit.total_completions})"
            )

        log = await service.get_action_log(USER_ID)
        counts = {}
        for entry in log:
            counts[entry.action_type.value] = counts.get(entry.action_type.value, 0) + 1
        print("\n=== Action log ===")
        for kind, count in sorted(counts.items()):
            print(f"  {kind}: {count}")


if __name__ == "__main__":
    args = parse_args()
    asyncio.run(main(args))
