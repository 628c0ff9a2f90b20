import json

import pytest
from progression.context import ProgressionContext
from progression.save.manager import SaveEvent, SaveManager


@pytest.fixture
def save_manager(context):
    return SaveManager(context)


def test_save_and_load(context, catalog, config, save_manager):
    context.grant_exp("q-1", 250)
    assert save_manager.save(slot=1)
    assert save_manager.exists(1)
    assert save_manager.validate_save(1)

    resumed = ProgressionContext(catalog, config)
    assert SaveManager(resumed).load(slot=1)

    assert resumed.level == 2
    assert resumed.current_exp == 150
    assert resumed.total_exp == 250
    assert resumed.rewards.is_consumed("q-1")


def test_save_file_layout(context, config, save_manager):
    context.grant_exp("dq-2024-01-01", 20)
    save_manager.save()

    with open(config.save_path / "progress_00.json") as f:
        data = json.load(f)

    assert data["version"] == "1.0"
    assert data["level"] == 1
    assert data["current_exp"] == 20
    assert data["consumed_reward_source_ids"] == ["dq-2024-01-01"]
    assert "checksum" in data


def test_corrupted_save_rejected(context, config, save_manager, recorder):
    context.event_bus.subscribe(SaveEvent.LOAD_FAILED, recorder.handler)
    context.grant_exp("q-1", 50)
    save_manager.save()

    path = config.save_path / "progress_00.json"
    data = json.loads(path.read_text())
    data["level"] = 15
    path.write_text(json.dumps(data))

    assert not save_manager.validate_save()
    assert not save_manager.load()
    assert context.level == 1
    assert context.current_exp == 50
    assert recorder.of(SaveEvent.LOAD_FAILED)[0]["error"] == "Checksum validation failed"


def test_load_without_validation(context, config, save_manager):
    save_manager.save()
    path = config.save_path / "progress_00.json"
    data = json.loads(path.read_text())
    data["current_exp"] = 42
    path.write_text(json.dumps(data))

    assert save_manager.load(validate=False)
    assert context.current_exp == 42


def test_inconsistent_save_keeps_state(context, config, save_manager, recorder):
    context.event_bus.subscribe(SaveEvent.LOAD_FAILED, recorder.handler)
    context.grant_exp("q-1", 30)

    # EXP beyond the level threshold, with a valid checksum
    data = {"version": "1.0", "level": 1, "current_exp": 5000, "total_exp": 5000,
            "consumed_reward_source_ids": []}
    data["checksum"] = save_manager._calculate_checksum(data)
    (config.save_path / "progress_03.json").write_text(json.dumps(data))

    assert not save_manager.load(slot=3)
    assert context.current_exp == 30
    assert len(recorder.of(SaveEvent.LOAD_FAILED)) == 1


def test_non_object_save_rejected(context, config, save_manager, recorder):
    context.event_bus.subscribe(SaveEvent.LOAD_FAILED, recorder.handler)
    context.grant_exp("q-1", 150)
    (config.save_path / "progress_00.json").write_text(json.dumps([1, 2, 3]))

    assert not save_manager.validate_save()
    assert not save_manager.load()
    assert not save_manager.load(validate=False)

    assert context.level == 2
    assert context.current_exp == 50
    assert len(recorder.of(SaveEvent.LOAD_FAILED)) == 2


def test_missing_slot(save_manager):
    assert not save_manager.exists(4)
    assert not save_manager.load(slot=4)
    assert not save_manager.validate_save(4)


def test_slot_range(save_manager):
    with pytest.raises(ValueError):
        save_manager.save(slot=SaveManager.MAX_SLOTS)
    with pytest.raises(ValueError):
        save_manager.load(slot=-1)


def test_delete(save_manager):
    save_manager.save(slot=2)
    assert save_manager.delete(slot=2)
    assert not save_manager.exists(2)
    assert save_manager.delete(slot=2)


def test_save_events(context, save_manager, recorder):
    context.event_bus.subscribe(SaveEvent.SAVE_COMPLETED, recorder.handler)
    context.event_bus.subscribe(SaveEvent.LOAD_COMPLETED, recorder.handler)

    save_manager.save(slot=5)
    save_manager.load(slot=5)

    assert recorder.types == [SaveEvent.SAVE_COMPLETED, SaveEvent.LOAD_COMPLETED]
    assert recorder.events[0]["slot"] == 5


def test_session_scoped_consumed_ids(catalog, config):
    config.persist_consumed_ids = False
    context = ProgressionContext(catalog, config)
    context.grant_exp("dq-2024-01-01", 20)
    SaveManager(context).save()

    resumed = ProgressionContext(catalog, config)
    SaveManager(resumed).load()

    assert resumed.current_exp == 20
    assert not resumed.rewards.is_consumed("dq-2024-01-01")


def test_generated_catalog_round_trip(catalog, config):
    context = ProgressionContext.for_new_game(
        {"HealthHarbor": ["clinic"], "MindPalace": ["library"]},
        starting_region="MindPalace",
        config=config,
    )
    SaveManager(context).save()

    resumed = ProgressionContext(catalog, config)
    assert SaveManager(resumed).load()
    assert resumed.starting_region().id == "MindPalace"
    assert resumed.get_unlock_level("clinic") == 21
