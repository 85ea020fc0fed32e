"""
Creature service: the host side of the engine.

Fully decoupled from storage technology and clock. All dependencies are
injected by the caller.

Coordinates one request at a time per user:
1. Load the user's creature (creating it on first access)
2. Run one rule (action, habit completion, decay pass)
3. Commit the new snapshot with its log entry (and habit) as one unit
4. Notify listeners and log the outcome

Rule rejections (no food, cooldown, passed out, already completed) are
re-raised unchanged after logging so the caller can show the message.
"""

import asyncio
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt

from .config import Config
from .errors import (
    CreatureExistsError,
    CreatureNotFoundError,
    CreatureRuleError,
    HabitNotFoundError,
    PersistenceError,
)
from .logging_utils import (
    log_deterministic,
    log_error,
    log_info,
    log_rejected,
    log_success,
    log_verbose,
)
from .persistence import InMemoryPersistence, PersistenceStrategy
from .rules import CreatureRules
from .schemas import (
    ActionKind,
    ActionLogEntry,
    CreatureSnapshot,
    CreatureStatus,
    HabitCompletionResult,
    HabitRecord,
    TransitionResult,
    VitalStat,
)
from .stats import describe

TransitionListener = Callable[[CreatureSnapshot, TransitionResult], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CreatureService:
    """
    Host-side coordinator for one or more users' creatures.

    Concurrency model:
    - Calls for the same user are serialized with a per-user asyncio.Lock, so
      the foreground "on view" check and the background scheduler never
      interleave their read-modify-write cycles
    - Each commit is retried on PersistenceError and is all-or-nothing
    """

    def __init__(
        self,
        persistence: Optional[PersistenceStrategy] = None,
        rules: Optional[CreatureRules] = None,
        *,
        clock: Callable[[], datetime] = utc_now,
        max_attempts: Optional[int] = None,
        creature_name: Optional[str] = None,
        initial_food: Optional[int] = None,
        listeners: Optional[List[TransitionListener]] = None,
    ):
        """Initialize the service with all dependencies injected.

        Args:
            persistence: Storage backend (defaults to InMemoryPersistence)
            rules: Rule set (defaults to CreatureRules)
            clock: Used only when a caller does not pass ``now`` explicitly
            max_attempts: Commit attempts before giving up (Config default)
            creature_name: Name for newly created creatures (Config default)
            initial_food: Food for newly created creatures (Config default)
            listeners: Callables invoked after each committed transition with
                (previous_snapshot, result). Failures are logged and ignored.
        """
        self.persistence = persistence or InMemoryPersistence()
        self.rules = rules or CreatureRules()
        self.clock = clock
        self.max_attempts = max_attempts or Config.PERSIST_MAX_ATTEMPTS
        self.creature_name = creature_name or Config.DEFAULT_CREATURE_NAME
        self.initial_food = Config.INITIAL_FOOD if initial_food is None else initial_food
        self.listeners = listeners or []
        self._locks: Dict[str, asyncio.Lock] = {}

    # Lifecycle -----------------------------------------------------------------

    async def initialize(self) -> None:
        await self.persistence.initialize()

    async def close(self) -> None:
        await self.persistence.close()

    async def __aenter__(self) -> "CreatureService":
        await self.initialize()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # Creature access -----------------------------------------------------------

    async def fetch_or_create(
        self, user_id: str, now: Optional[datetime] = None
    ) -> CreatureSnapshot:
        """Return the user's creature, creating it on first access.

        Idempotent: a concurrent creator losing the insert race simply reads
        the winner's creature back.
        """
        async with self._lock_for(user_id):
            return await self._fetch_or_create(user_id, now or self.clock())

    async def get_creature(self, user_id: str) -> CreatureSnapshot:
        creature = await self.persistence.get_creature(user_id)
        if creature is None:
            raise CreatureNotFoundError(user_id)
        return creature

    async def get_status(self, user_id: str) -> CreatureStatus:
        return describe(await self.get_creature(user_id))

    async def get_action_log(
        self, user_id: str, limit: Optional[int] = None
    ) -> List[ActionLogEntry]:
        return await self.persistence.get_action_log(user_id, limit)

    # Player actions ------------------------------------------------------------

    async def perform(
        self, user_id: str, kind: ActionKind, now: Optional[datetime] = None
    ) -> TransitionResult:
        """Apply a player action to the user's creature and commit it."""
        now = now or self.clock()
        kind = ActionKind(kind)
        async with self._lock_for(user_id):
            creature = await self._fetch_or_create(user_id, now)
            try:
                result = self.rules.apply_action(kind, creature, now)
            except CreatureRuleError as exc:
                log_rejected(f"[{user_id}] {kind.value} rejected: {exc.message}")
                raise
            await self._commit(creature, result)

        log_success(f"[{user_id}] {kind.value}: {self.rules.format_summary(result.snapshot)}")
        return result

    async def feed(self, user_id: str, now: Optional[datetime] = None) -> TransitionResult:
        return await self.perform(user_id, ActionKind.FEED, now)

    async def clean(self, user_id: str, now: Optional[datetime] = None) -> TransitionResult:
        return await self.perform(user_id, ActionKind.CLEAN, now)

    async def pet(self, user_id: str, now: Optional[datetime] = None) -> TransitionResult:
        return await self.perform(user_id, ActionKind.PET, now)

    # Habits --------------------------------------------------------------------

    async def create_habit(
        self, user_id: str, name: str, now: Optional[datetime] = None
    ) -> HabitRecord:
        habit = HabitRecord(user_id=user_id, name=name, created_at=now or self.clock())
        await self.persistence.save_habit(habit)
        return habit

    async def list_habits(self, user_id: str) -> List[HabitRecord]:
        return await self.persistence.list_habits(user_id)

    async def delete_habit(self, user_id: str, habit_id: str) -> None:
        await self.persistence.delete_habit(user_id, habit_id)

    async def complete_habit(
        self, user_id: str, habit_id: str, now: Optional[datetime] = None
    ) -> HabitCompletionResult:
        """Complete a habit for today, rewarding (and maybe reviving) the creature."""
        now = now or self.clock()
        async with self._lock_for(user_id):
            habit = await self.persistence.get_habit(user_id, habit_id)
            if habit is None:
                raise HabitNotFoundError(habit_id)
            creature = await self.persistence.get_creature(user_id)

            try:
                result = self.rules.complete_habit(habit, creature, now)
            except CreatureRuleError as exc:
                log_rejected(f"[{user_id}] habit '{habit.name or habit.id}': {exc.message}")
                raise

            if result.snapshot is None:
                await self._retrying(lambda: self.persistence.save_habit(result.habit))
            else:
                await self._commit(
                    creature,
                    TransitionResult(snapshot=result.snapshot, log_entry=result.log_entry),
                    habit=result.habit,
                )

        message = (
            f"[{user_id}] habit '{habit.name or habit.id}' day {result.new_streak} streak, "
            f"+{result.food_reward} food"
        )
        if result.revived:
            message += " (creature revived)"
        log_success(message)
        return result

    # Passive decay -------------------------------------------------------------

    async def check_for_updates(
        self, user_id: str, now: Optional[datetime] = None
    ) -> TransitionResult:
        """Run poop generation and health decay (the "on view" pass)."""
        now = now or self.clock()
        async with self._lock_for(user_id):
            creature = await self._fetch_or_create(user_id, now)
            habits = await self.persistence.list_habits(user_id)
            result = self.rules.apply_tick(creature, habits, now)
            await self._commit(creature, result)

        if result.log_entry is not None:
            log_deterministic(
                f"[{user_id}] decay applied: {self.rules.format_summary(result.snapshot)}"
            )
        return result

    async def degrade(
        self, user_id: str, now: Optional[datetime] = None
    ) -> Optional[TransitionResult]:
        """Run one hourly background degradation pass.

        Returns None when the user has no creature yet; the background job
        never creates one.
        """
        now = now or self.clock()
        async with self._lock_for(user_id):
            creature = await self.persistence.get_creature(user_id)
            if creature is None:
                log_info(f"[{user_id}] no creature found for degradation")
                return None
            habits = await self.persistence.list_habits(user_id)
            result = self.rules.apply_hourly_degradation(creature, habits, now)
            await self._commit(creature, result)

        entry = result.log_entry
        if entry is not None:
            log_deterministic(
                f"[{user_id}] degraded: H{entry.health_effect:+d} Ha{entry.happiness_effect:+d} "
                f"C{entry.cleanliness_effect:+d} Hu{entry.hunger_effect:+d} "
                f"({len(habits)} habits)"
            )
        return result

    # Dev/test tooling ----------------------------------------------------------

    async def adjust_stat(
        self, user_id: str, stat: VitalStat, delta: int, now: Optional[datetime] = None
    ) -> TransitionResult:
        return await self._apply_dev(
            user_id, now, lambda creature, at: self.rules.adjust_stat(creature, stat, delta, at)
        )

    async def adjust_food(
        self, user_id: str, delta: int, now: Optional[datetime] = None
    ) -> TransitionResult:
        return await self._apply_dev(
            user_id, now, lambda creature, at: self.rules.adjust_food(creature, delta, at)
        )

    async def force_poop(self, user_id: str, now: Optional[datetime] = None) -> TransitionResult:
        return await self._apply_dev(user_id, now, self.rules.force_poop)

    async def force_faint(self, user_id: str, now: Optional[datetime] = None) -> TransitionResult:
        return await self._apply_dev(user_id, now, self.rules.force_faint)

    async def reset_stats(self, user_id: str, now: Optional[datetime] = None) -> TransitionResult:
        return await self._apply_dev(user_id, now, self.rules.reset_stats)

    # Internal helpers ----------------------------------------------------------

    def _lock_for(self, user_id: str) -> asyncio.Lock:
        lock = self._locks.get(user_id)
        if lock is None:
            lock = self._locks[user_id] = asyncio.Lock()
        return lock

    def release_user(self, user_id: str) -> bool:
        """Forget a user's lock once they log out.

        A lock that is currently held is kept; returns True when dropped.
        """
        lock = self._locks.get(user_id)
        if lock is None or lock.locked():
            return False
        del self._locks[user_id]
        return True

    async def _fetch_or_create(self, user_id: str, now: datetime) -> CreatureSnapshot:
        creature = await self.persistence.get_creature(user_id)
        if creature is not None:
            return creature

        creature = self.rules.create_creature(
            user_id, now, name=self.creature_name, food_count=self.initial_food
        )
        try:
            await self._retrying(lambda: self.persistence.insert_creature(creature))
        except CreatureExistsError:
            # Another host created it first; use theirs.
            existing = await self.persistence.get_creature(user_id)
            if existing is None:
                raise
            return existing

        log_info(f"[{user_id}] created creature '{creature.name}'")
        return creature

    async def _apply_dev(self, user_id: str, now: Optional[datetime], rule) -> TransitionResult:
        now = now or self.clock()
        async with self._lock_for(user_id):
            creature = await self.get_creature(user_id)
            result = rule(creature, now)
            await self._commit(creature, result)
        log_verbose(f"[{user_id}] dev adjustment: {self.rules.format_summary(result.snapshot)}")
        return result

    async def _commit(
        self,
        previous: CreatureSnapshot,
        result: TransitionResult,
        habit: Optional[HabitRecord] = None,
    ) -> None:
        """Persist a transition if it changed anything, then notify listeners."""
        if result.snapshot == previous and result.log_entry is None and habit is None:
            return

        await self._retrying(
            lambda: self.persistence.commit(result.snapshot, result.log_entry, habit)
        )

        for listener in self.listeners:
            try:
                listener(previous, result)
            except Exception as exc:  # pragma: no cover - diagnostic hook
                log_error(f"Transition listener failed: {exc}")

    async def _retrying(self, operation) -> None:
        # Only PersistenceError is retried; rule errors and CreatureExistsError
        # propagate on the first attempt.
        attempt_number = 0
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(PersistenceError),
            stop=stop_after_attempt(self.max_attempts),
            reraise=True,
        ):
            with attempt:
                attempt_number += 1
                if attempt_number > 1:
                    log_error(f"Persistence retry {attempt_number}/{self.max_attempts}")
                await operation()
