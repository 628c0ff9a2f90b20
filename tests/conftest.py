import os
import sys
from pathlib import Path

import pytest

# Ensure engine modules can be imported
sys.path.append(os.getcwd())

DEFAULT_DATA_PATH = Path(__file__).resolve().parent.parent / "game" / "data"


# Region unlock levels: HealthHarbor 1, MindPalace 4, CreativeCommons 8, SocialSquare 12
SAMPLE_REGIONS = [
    {
        "id": "HealthHarbor",
        "display_name": "Health Harbor",
        "buildings": [
            {"id": "clinic", "unlock_level": 1},
            {"id": "gym", "unlock_level": 3},
            {"id": "spa", "unlock_level": 5},
        ],
    },
    {
        "id": "MindPalace",
        "display_name": "Mind Palace",
        "buildings": [
            {"id": "library", "unlock_level": 4},
            {"id": "observatory", "unlock_level": 6},
        ],
    },
    {
        "id": "CreativeCommons",
        "display_name": "Creative Commons",
        "buildings": [
            {"id": "studio", "unlock_level": 8},
            {"id": "theater", "unlock_level": 9},
        ],
    },
    {
        "id": "SocialSquare",
        "display_name": "Social Square",
        "buildings": [
            {"id": "plaza", "unlock_level": 12},
        ],
    },
]


@pytest.fixture
def default_data_path():
    """Static data shipped with the repository."""
    return DEFAULT_DATA_PATH


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from unlock_engine.core.events import EventBus
    return EventBus()


@pytest.fixture
def catalog():
    """Four-region catalog used across progression tests."""
    from progression.unlocks.catalog import UnlockCatalog
    return UnlockCatalog.from_records(SAMPLE_REGIONS)


@pytest.fixture
def resolver(catalog):
    from progression.unlocks.resolver import UnlockResolver
    return UnlockResolver(catalog)


@pytest.fixture
def linear_curve():
    """expRequired(level) = 100 * level."""
    from progression.leveling.curves import LinearCurve
    return LinearCurve(step=100)


@pytest.fixture
def dispatcher(event_bus):
    from progression.notifications import NotificationDispatcher
    return NotificationDispatcher(event_bus)


@pytest.fixture
def ledger(linear_curve, resolver, dispatcher):
    """Ledger at level 1, linear curve, capped at level 20."""
    from progression.leveling.ledger import ExperienceLedger
    return ExperienceLedger(linear_curve, resolver=resolver, max_level=20, dispatcher=dispatcher)


@pytest.fixture
def config(tmp_path):
    from progression.config import CurveConfig, ProgressionConfig
    return ProgressionConfig(
        curve=CurveConfig(kind="linear", step=100),
        max_level=20,
        data_path=DEFAULT_DATA_PATH,
        save_path=tmp_path / "saves",
    )


@pytest.fixture
def context(catalog, config):
    """Fully wired context over the sample catalog."""
    from progression.context import ProgressionContext
    return ProgressionContext(catalog, config)


@pytest.fixture
def recorder():
    """Collects events; subscribe with recorder.handler (held strongly by the fixture)."""
    class Recorder:
        def __init__(self):
            self.events = []

        def handler(self, event):
            self.events.append(event)

        def of(self, event_type):
            return [e for e in self.events if e.type == event_type]

        @property
        def types(self):
            return [e.type for e in self.events]

    return Recorder()
