"""
Save/Load system - progression persistence.

Provides:
- Save/load progression state to JSON files
- Multiple save slots (10 by default)
- Save integrity validation (checksum)
- Save/load events on the event bus
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from enum import Enum, auto
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from unlock_engine.core.events import EventBus
from progression.save.data import SAVE_VERSION, ProgressionSaveData

if TYPE_CHECKING:
    from progression.context import ProgressionContext

logger = logging.getLogger(__name__)


class SaveEvent(Enum):
    """Save system events."""
    SAVE_COMPLETED = auto()
    SAVE_FAILED = auto()
    LOAD_COMPLETED = auto()
    LOAD_FAILED = auto()


class SaveManager:
    """
    Manages saving and loading progression state.

    Saves happen at explicit save points chosen by the host, never in the
    middle of reward processing.

    Usage:
        save_mgr = SaveManager(context)
        save_mgr.save(slot=0)
        save_mgr.load(slot=0)
    """

    VERSION = SAVE_VERSION
    MAX_SLOTS = 10

    def __init__(
        self,
        context: ProgressionContext,
        save_path: Optional[Path | str] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.context = context
        self.save_path = Path(save_path) if save_path is not None else context.config.save_path
        self.save_path.mkdir(parents=True, exist_ok=True)
        self.event_bus = event_bus or context.event_bus

    def _get_slot_path(self, slot: int) -> Path:
        """Get path for a save slot."""
        if not 0 <= slot < self.MAX_SLOTS:
            raise ValueError(f"Save slot must be in 0..{self.MAX_SLOTS - 1}, got {slot}")
        return self.save_path / f"progress_{slot:02d}.json"

    def exists(self, slot: int = 0) -> bool:
        return self._get_slot_path(slot).exists()

    def save(self, slot: int = 0) -> bool:
        """
        Save the current progression state.

        Returns:
            True if save was successful
        """
        save_path = self._get_slot_path(slot)

        try:
            save_dict = self.context.snapshot().model_dump(mode='json')
            save_dict['checksum'] = self._calculate_checksum(save_dict)

            with open(save_path, 'w', encoding='utf-8') as f:
                json.dump(save_dict, f, indent=2)

        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Save to slot {slot} failed: {e}")
            self.event_bus.publish(SaveEvent.SAVE_FAILED, slot=slot, error=str(e))
            return False

        logger.info(f"Saved progression to {save_path}")
        self.event_bus.publish(SaveEvent.SAVE_COMPLETED, slot=slot)
        return True

    def load(self, slot: int = 0, validate: bool = True) -> bool:
        """
        Load a saved progression state.

        Args:
            slot: Save slot number
            validate: Whether to validate checksum

        Returns:
            True if load was successful; on failure the current state is kept
        """
        save_path = self._get_slot_path(slot)
        if not save_path.exists():
            return False

        try:
            with open(save_path, 'r', encoding='utf-8') as f:
                save_dict = json.load(f)

            if not isinstance(save_dict, dict):
                logger.error(f"Save slot {slot} corrupted: expected a JSON object")
                self.event_bus.publish(
                    SaveEvent.LOAD_FAILED,
                    slot=slot,
                    error="Save data is not a JSON object",
                )
                return False

            if validate:
                checksum = save_dict.get('checksum')
                if not checksum or not self._verify_checksum(save_dict, checksum):
                    logger.error(f"Save slot {slot} corrupted: checksum mismatch")
                    self.event_bus.publish(
                        SaveEvent.LOAD_FAILED,
                        slot=slot,
                        error="Checksum validation failed",
                    )
                    return False

            save_data = ProgressionSaveData.model_validate(save_dict)
            if save_data.version != self.VERSION:
                logger.warning(
                    f"Save slot {slot} has version {save_data.version}, expected {self.VERSION}"
                )
            self.context.restore(save_data)

        except (OSError, ValueError, KeyError) as e:
            logger.error(f"Load from slot {slot} failed: {e}")
            self.event_bus.publish(SaveEvent.LOAD_FAILED, slot=slot, error=str(e))
            return False

        logger.info(f"Loaded progression from {save_path}")
        self.event_bus.publish(SaveEvent.LOAD_COMPLETED, slot=slot)
        return True

    def delete(self, slot: int = 0) -> bool:
        """Delete a save slot."""
        save_path = self._get_slot_path(slot)
        try:
            if save_path.exists():
                save_path.unlink()
        except OSError as e:
            logger.error(f"Failed to delete save slot {slot}: {e}")
            return False
        return True

    def validate_save(self, slot: int = 0) -> bool:
        """
        Validate a save file's integrity.

        Returns:
            True if save is valid, False if corrupted or missing
        """
        save_path = self._get_slot_path(slot)
        if not save_path.exists():
            return False

        try:
            with open(save_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError):
            return False

        if not isinstance(data, dict):
            return False

        checksum = data.get('checksum')
        if not checksum:
            return False
        return self._verify_checksum(data, checksum)

    # Checksum validation

    def _calculate_checksum(self, data: dict) -> str:
        """Calculate checksum for save data."""
        json_str = json.dumps(data, sort_keys=True, separators=(',', ':'))
        hash_bytes = hashlib.sha256(json_str.encode('utf-8')).digest()
        return base64.b64encode(hash_bytes).decode('ascii')

    def _verify_checksum(self, data: dict, expected_checksum: str) -> bool:
        """Verify save data checksum."""
        data_copy = data.copy()
        data_copy.pop('checksum', None)
        return self._calculate_checksum(data_copy) == expected_checksum
