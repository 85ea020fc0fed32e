"""
PersistenceStrategy interface for pluggable creature storage.

The engine never stores anything; hosts pick a backend implementing this
interface and hand it to ``CreatureService``. Two implementations ship with
the library:

1. InMemoryPersistence - Dict-based storage, data lost on exit (testing, prototyping)
2. JsonPersistence - One JSON document per user, human-readable (small deployments)

Key responsibilities:
- Fetch and insert the single creature a user owns
- Commit a new snapshot together with its log entry (and updated habit) as
  one unit, so a crash never leaves food spent without a log entry
- Store the user's habits

Usage pattern:
    persistence = InMemoryPersistence()  # or JsonPersistence("data/")
    await persistence.initialize()
    await persistence.commit(snapshot, log_entry)
    await persistence.close()
"""

import asyncio
import json
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional
from urllib.parse import quote

from pydantic import ValidationError

from .config import Config
from .errors import CreatureExistsError, PersistenceError
from .schemas import ActionLogEntry, CreatureSnapshot, HabitRecord


class PersistenceStrategy(ABC):
    """Abstract base class for creature persistence.

    Async interface rationale:
    - Real backends do I/O; async keeps the scheduler and request handlers
      responsive while a write is in flight
    - initialize() and close() manage files, pools, etc.

    Atomicity contract:
    - commit() must apply snapshot, log entry and habit together or not at
      all. Backends raise PersistenceError on failure; the service retries.
    - insert_creature() must reject a second creature for the same user with
      CreatureExistsError (one creature per user).
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the backend (create directories, open connections)."""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources."""
        pass

    @abstractmethod
    async def get_creature(self, user_id: str) -> Optional[CreatureSnapshot]:
        """Return the user's creature, or None if they have none yet."""
        pass

    @abstractmethod
    async def insert_creature(self, snapshot: CreatureSnapshot) -> None:
        """
        Store a brand-new creature.

        Raises:
            CreatureExistsError: If the user already owns a creature
        """
        pass

    @abstractmethod
    async def commit(
        self,
        snapshot: CreatureSnapshot,
        log_entry: Optional[ActionLogEntry] = None,
        habit: Optional[HabitRecord] = None,
    ) -> None:
        """
        Persist a transition result as one unit.

        Args:
            snapshot: New creature snapshot (replaces the stored one)
            log_entry: Optional audit entry produced by the same transition
            habit: Optional habit updated by the same transition

        Raises:
            PersistenceError: If nothing could be written
        """
        pass

    @abstractmethod
    async def get_action_log(
        self, user_id: str, limit: Optional[int] = None
    ) -> List[ActionLogEntry]:
        """Return the user's log entries, most recent first."""
        pass

    @abstractmethod
    async def save_habit(self, habit: HabitRecord) -> None:
        """Insert or replace a habit (``habit.user_id`` must be set)."""
        pass

    @abstractmethod
    async def get_habit(self, user_id: str, habit_id: str) -> Optional[HabitRecord]:
        pass

    @abstractmethod
    async def list_habits(self, user_id: str) -> List[HabitRecord]:
        pass

    @abstractmethod
    async def delete_habit(self, user_id: str, habit_id: str) -> None:
        pass


def _require_user(habit: HabitRecord) -> str:
    if not habit.user_id:
        raise ValueError(f"Habit {habit.id} has no user_id")
    return habit.user_id


def _recent_first(entries: List[ActionLogEntry], limit: Optional[int]) -> List[ActionLogEntry]:
    ordered = sorted(entries, key=lambda entry: entry.created_at, reverse=True)
    return ordered if limit is None else ordered[:limit]


class InMemoryPersistence(PersistenceStrategy):
    """In-memory persistence using Python dicts (no database, no files).

    Storage structure:
    - creatures: Dict[user_id, CreatureSnapshot]
    - habits: Dict[user_id, Dict[habit_id, HabitRecord]]
    - actions: Dict[user_id, List[ActionLogEntry]]

    Perfect for unit tests and prototypes. Data is lost when the process
    exits.
    """

    def __init__(self):
        """Initialize in-memory storage."""
        self.creatures: Dict[str, CreatureSnapshot] = {}
        self.habits: Dict[str, Dict[str, HabitRecord]] = {}
        self.actions: Dict[str, List[ActionLogEntry]] = {}

    async def initialize(self) -> None:
        pass

    async def close(self) -> None:
        """
        No-op: data is kept so callers can inspect it after a run.
        """
        pass

    async def get_creature(self, user_id: str) -> Optional[CreatureSnapshot]:
        return self.creatures.get(user_id)

    async def insert_creature(self, snapshot: CreatureSnapshot) -> None:
        if snapshot.user_id in self.creatures:
            raise CreatureExistsError(snapshot.user_id)
        self.creatures[snapshot.user_id] = snapshot

    async def commit(
        self,
        snapshot: CreatureSnapshot,
        log_entry: Optional[ActionLogEntry] = None,
        habit: Optional[HabitRecord] = None,
    ) -> None:
        # Validate everything before touching any dict so a bad habit
        # cannot leave a half-applied commit behind.
        habit_user = _require_user(habit) if habit is not None else None

        self.creatures[snapshot.user_id] = snapshot
        if log_entry is not None:
            self.actions.setdefault(log_entry.user_id, []).append(log_entry)
        if habit is not None:
            self.habits.setdefault(habit_user, {})[habit.id] = habit

    async def get_action_log(
        self, user_id: str, limit: Optional[int] = None
    ) -> List[ActionLogEntry]:
        return _recent_first(self.actions.get(user_id, []), limit)

    async def save_habit(self, habit: HabitRecord) -> None:
        self.habits.setdefault(_require_user(habit), {})[habit.id] = habit

    async def get_habit(self, user_id: str, habit_id: str) -> Optional[HabitRecord]:
        return self.habits.get(user_id, {}).get(habit_id)

    async def list_habits(self, user_id: str) -> List[HabitRecord]:
        return list(self.habits.get(user_id, {}).values())

    async def delete_habit(self, user_id: str, habit_id: str) -> None:
        self.habits.get(user_id, {}).pop(habit_id, None)


class JsonPersistence(PersistenceStrategy):
    """File-based persistence using one JSON document per user.

    Directory structure:
    ```
    {base_path}/
      users/
        {user_id}.json      # {"creature": {...}, "habits": {...}, "actions": [...]}
    ```

    Keeping a user's creature, habits and log in one document makes commit()
    atomic: the whole document is written to a temporary file and swapped in
    with ``os.replace``.

    Async operations:
    - All file I/O runs in a thread (asyncio.to_thread)
    - A lock serializes read-modify-write cycles within the process

    NOT suitable for multiple processes writing the same user.
    """

    def __init__(self, base_path: Optional[Path | str] = None):
        self.base_path = Path(base_path) if base_path is not None else Config.DATA_DIR
        self._lock = asyncio.Lock()

    async def initialize(self) -> None:
        await asyncio.to_thread(self._users_dir().mkdir, parents=True, exist_ok=True)

    async def close(self) -> None:
        # Nothing to clean up for JSON persistence
        return None

    async def get_creature(self, user_id: str) -> Optional[CreatureSnapshot]:
        document = await self._read(user_id)
        payload = document.get("creature")
        if payload is None:
            return None
        return self._validate(CreatureSnapshot, payload)

    async def insert_creature(self, snapshot: CreatureSnapshot) -> None:
        async with self._lock:
            document = await self._read(snapshot.user_id)
            if document.get("creature") is not None:
                raise CreatureExistsError(snapshot.user_id)
            document["creature"] = snapshot.model_dump(mode="json")
            await self._write(snapshot.user_id, document)

    async def commit(
        self,
        snapshot: CreatureSnapshot,
        log_entry: Optional[ActionLogEntry] = None,
        habit: Optional[HabitRecord] = None,
    ) -> None:
        async with self._lock:
            document = await self._read(snapshot.user_id)
            document["creature"] = snapshot.model_dump(mode="json")
            if log_entry is not None:
                document.setdefault("actions", []).append(log_entry.model_dump(mode="json"))
            if habit is not None:
                _require_user(habit)
                document.setdefault("habits", {})[habit.id] = habit.model_dump(mode="json")
            await self._write(snapshot.user_id, document)

    async def get_action_log(
        self, user_id: str, limit: Optional[int] = None
    ) -> List[ActionLogEntry]:
        document = await self._read(user_id)
        entries = [
            self._validate(ActionLogEntry, item) for item in document.get("actions", [])
        ]
        return _recent_first(entries, limit)

    async def save_habit(self, habit: HabitRecord) -> None:
        user_id = _require_user(habit)
        async with self._lock:
            document = await self._read(user_id)
            document.setdefault("habits", {})[habit.id] = habit.model_dump(mode="json")
            await self._write(user_id, document)

    async def get_habit(self, user_id: str, habit_id: str) -> Optional[HabitRecord]:
        document = await self._read(user_id)
        payload = document.get("habits", {}).get(habit_id)
        if payload is None:
            return None
        return self._validate(HabitRecord, payload)

    async def list_habits(self, user_id: str) -> List[HabitRecord]:
        document = await self._read(user_id)
        return [
            self._validate(HabitRecord, item)
            for item in document.get("habits", {}).values()
        ]

    async def delete_habit(self, user_id: str, habit_id: str) -> None:
        async with self._lock:
            document = await self._read(user_id)
            if document.get("habits", {}).pop(habit_id, None) is not None:
                await self._write(user_id, document)

    # Internal helpers ----------------------------------------------------------

    def _users_dir(self) -> Path:
        return self.base_path / "users"

    def _user_path(self, user_id: str) -> Path:
        return self._users_dir() / f"{quote(user_id, safe='')}.json"

    @staticmethod
    def _validate(model, payload):
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            raise PersistenceError(f"Stored {model.__name__} is invalid: {exc}") from exc

    async def _read(self, user_id: str) -> dict:
        path = self._user_path(user_id)

        def _load() -> dict:
            if not path.exists():
                return {}
            return json.loads(path.read_text("utf-8"))

        try:
            return await asyncio.to_thread(_load)
        except (OSError, ValueError) as exc:
            raise PersistenceError(f"Could not read {path}: {exc}") from exc

    async def _write(self, user_id: str, document: dict) -> None:
        path = self._user_path(user_id)
        tmp_path = path.with_suffix(".json.tmp")

        def _dump() -> None:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(document, indent=2), "utf-8")
            os.replace(tmp_path, path)

        try:
            await asyncio.to_thread(_dump)
        except OSError as exc:
            raise PersistenceError(f"Could not write {path}: {exc}") from exc
