"""
Save module - progression persistence.

Provides:
- Save/load progression state
- Multiple save slots (10 by default)
- Checksum validation
- Persisted consumed reward ids and generated unlock tables
"""

from progression.save.data import ProgressionSaveData, SAVE_VERSION
from progression.save.manager import SaveManager, SaveEvent

__all__ = [
    "ProgressionSaveData",
    "SAVE_VERSION",
    "SaveManager",
    "SaveEvent",
]
