"""Save System for NextEra.

A run is persisted as a single versioned JSON envelope per slot. No random
state is stored: loading rebuilds the root stream from ``run_seed`` and every
subsystem re-derives its child streams by label.

Stores are synchronous and complete-or-fail. ``FileSaveStore`` writes to a
temporary file and renames it over the slot, so a reader never sees a torn
file.

Usage:
    saves = SaveSystem(InMemorySaveStore())
    saves.save("slot1", context)
    envelope = saves.load("slot1").unwrap()
"""

import json
import logging
import os
import re
import tempfile
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional, Protocol, Union

from pydantic import BaseModel, Field, ValidationError

from nextera.config import settings
from nextera.core.constants import SAVE_VERSION
from nextera.core.result import ErrorCode, Ok, Result, err
from nextera.exceptions import SaveFormatError, SlotNotFoundError
from nextera.data.models.battle import BattleResult, BattleReward
from nextera.data.models.gem import ActiveGemState
from nextera.data.models.item import Item
from nextera.data.models.opponent import OpponentPreview
from nextera.data.models.progression import ProgressionCounters, Roster, RunContext
from nextera.data.models.unit import Equipment

logger = logging.getLogger(__name__)

_SLOT_NAME = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


@dataclass(frozen=True)
class SlotInfo:
    """A stored slot as reported by ``list``."""

    slot: str
    modified: str
    size: int


class SaveStore(Protocol):
    """Key-value blob store for save slots.

    ``read`` and ``delete`` raise ``SlotNotFoundError`` for a missing slot;
    any other failure surfaces as ``OSError``.
    """

    def write(self, slot: str, data: str) -> None: ...

    def read(self, slot: str) -> str: ...

    def delete(self, slot: str) -> None: ...

    def list(self) -> list[SlotInfo]: ...


class InMemorySaveStore:
    """Dict-backed store for tests and embedding."""

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._slots: dict[str, tuple[str, str]] = {}
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def write(self, slot: str, data: str) -> None:
        self._slots[slot] = (data, self._clock().isoformat())

    def read(self, slot: str) -> str:
        if slot not in self._slots:
            raise SlotNotFoundError(slot)
        return self._slots[slot][0]

    def delete(self, slot: str) -> None:
        if slot not in self._slots:
            raise SlotNotFoundError(slot)
        del self._slots[slot]

    def list(self) -> list[SlotInfo]:
        return [
            SlotInfo(slot=slot, modified=modified, size=len(data))
            for slot, (data, modified) in sorted(self._slots.items())
        ]


class FileSaveStore:
    """One ``<slot>.json`` file per slot under ``directory``."""

    def __init__(self, directory: Union[str, Path, None] = None):
        self.directory = Path(directory if directory is not None else settings.SAVE_DIR)

    def _path(self, slot: str) -> Path:
        if not _SLOT_NAME.match(slot):
            raise OSError(f"Invalid slot name: {slot!r}")
        return self.directory / f"{slot}.json"

    def write(self, slot: str, data: str) -> None:
        path = self._path(slot)
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{slot}.", suffix=".tmp", dir=self.directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, path)
        except OSError:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def read(self, slot: str) -> str:
        try:
            return self._path(slot).read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise SlotNotFoundError(slot) from e

    def delete(self, slot: str) -> None:
        try:
            self._path(slot).unlink()
        except FileNotFoundError as e:
            raise SlotNotFoundError(slot) from e

    def list(self) -> list[SlotInfo]:
        if not self.directory.exists():
            return []
        infos = []
        for path in sorted(self.directory.glob("*.json")):
            stat = path.stat()
            modified = datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat()
            infos.append(SlotInfo(slot=path.stem, modified=modified, size=stat.st_size))
        return infos


class SaveEnvelope(BaseModel):
    """Persisted snapshot of a run."""

    version: str = SAVE_VERSION
    timestamp: str
    run_seed: int
    battle_index: int = Field(..., ge=0)
    roster: Roster
    inventory: tuple[Item, ...] = ()
    equipment_inventory: tuple[Equipment, ...] = ()
    gems: tuple[str, ...] = ()
    active_gem_state: ActiveGemState = Field(default_factory=ActiveGemState)
    progression: ProgressionCounters = Field(default_factory=ProgressionCounters)
    last_choices: tuple[OpponentPreview, ...] = ()
    selected_opponent_id: Optional[str] = None
    last_battle_result: Optional[BattleResult] = None
    last_reward: Optional[BattleReward] = None

    model_config = {"frozen": True}

    @classmethod
    def from_context(cls, context: RunContext, timestamp: str) -> "SaveEnvelope":
        return cls(
            timestamp=timestamp,
            run_seed=context.run_seed,
            battle_index=context.battle_index,
            roster=context.roster,
            inventory=context.inventory,
            equipment_inventory=context.equipment_inventory,
            gems=context.gems,
            active_gem_state=context.active_gem_state,
            progression=context.progression,
            last_choices=context.current_choices,
            selected_opponent_id=context.selected_opponent_id,
            last_battle_result=context.last_battle_result,
            last_reward=context.last_reward,
        )

    def to_context(self) -> RunContext:
        """Rebuild a run context, including any battle awaiting ``advance``."""
        return RunContext(
            run_seed=self.run_seed,
            battle_index=self.battle_index,
            roster=self.roster,
            inventory=self.inventory,
            equipment_inventory=self.equipment_inventory,
            gems=self.gems,
            active_gem_state=self.active_gem_state,
            progression=self.progression,
            current_choices=self.last_choices,
            selected_opponent_id=self.selected_opponent_id,
            last_battle_result=self.last_battle_result,
            last_reward=self.last_reward,
        )


def parse_envelope(raw: str) -> SaveEnvelope:
    """Parse and validate a stored envelope.

    Raises:
        SaveFormatError: On invalid JSON, an unknown version or a bad shape.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SaveFormatError(f"Save is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SaveFormatError("Save envelope must be a JSON object")
    version = data.get("version")
    if version != SAVE_VERSION:
        raise SaveFormatError(f"Unsupported save version: {version!r}")

    try:
        return SaveEnvelope.model_validate(data)
    except ValidationError as e:
        raise SaveFormatError(f"Malformed save envelope: {e}") from e


class SaveSystem:
    """
    Saves and loads run snapshots through a SaveStore.
    """

    def __init__(
        self,
        store: Optional[SaveStore] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store if store is not None else FileSaveStore(settings.SAVE_DIR)
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def save(self, slot: str, context: RunContext) -> Result[None]:
        envelope = SaveEnvelope.from_context(context, self._clock().isoformat())
        serialized = envelope.model_dump_json()
        try:
            self.store.write(slot, serialized)
        except OSError as e:
            logger.error("Save failed: slot=%s error=%s", slot, e)
            return err(ErrorCode.SAVE_FAILED, f"Failed to save: {e}")

        logger.info("Saved slot=%s size=%d battle_index=%d", slot, len(serialized), context.battle_index)
        return Ok(None)

    def load(self, slot: str) -> Result[SaveEnvelope]:
        """
        Load a slot.

        Returns:
            Ok(envelope), Err(SAVE_NOT_FOUND) or Err(SAVE_FAILED)

        Raises:
            SaveFormatError: If the stored envelope is corrupted.
        """
        try:
            raw = self.store.read(slot)
        except SlotNotFoundError:
            logger.warning("Save slot not found: %s", slot)
            return err(ErrorCode.SAVE_NOT_FOUND, f"Save slot not found: {slot}")
        except OSError as e:
            logger.error("Load failed: slot=%s error=%s", slot, e)
            return err(ErrorCode.SAVE_FAILED, f"Failed to load: {e}")

        envelope = parse_envelope(raw)
        logger.info("Loaded slot=%s timestamp=%s", slot, envelope.timestamp)
        return Ok(envelope)

    def delete_save(self, slot: str) -> Result[None]:
        try:
            self.store.delete(slot)
        except SlotNotFoundError:
            logger.warning("Save slot not found: %s", slot)
            return err(ErrorCode.SAVE_NOT_FOUND, f"Save slot not found: {slot}")
        except OSError as e:
            logger.error("Delete failed: slot=%s error=%s", slot, e)
            return err(ErrorCode.SAVE_FAILED, f"Failed to delete: {e}")

        logger.info("Deleted slot=%s", slot)
        return Ok(None)

    def list_slots(self) -> Result[tuple[SlotInfo, ...]]:
        try:
            return Ok(tuple(self.store.list()))
        except OSError as e:
            logger.error("Listing slots failed: %s", e)
            return err(ErrorCode.SAVE_FAILED, f"Failed to list slots: {e}")

    def has_slot(self, slot: str) -> bool:
        result = self.list_slots()
        return result.ok and any(info.slot == slot for info in result.value)
