import pytest
from pydantic import ValidationError
from unlock_engine.core.errors import DuplicateReward, InvalidRewardAmount
from progression.components.rewards import Difficulty, RewardEvent
from progression.notifications import ProgressionEvent
from progression.rewards.pipeline import RewardPipeline, RewardStatus


@pytest.fixture
def pipeline(ledger):
    return RewardPipeline(ledger)


def test_applies_reward(pipeline, ledger):
    result = pipeline.submit(RewardEvent(source_id="q-1", exp_amount=30, difficulty=Difficulty.HARD))

    assert result.applied
    assert result.status == RewardStatus.APPLIED
    assert result.difficulty == Difficulty.HARD
    assert result.level_change.exp_added == 30
    assert result.error is None
    assert ledger.current_exp == 30
    assert pipeline.is_consumed("q-1")


def test_duplicate_daily_quest_counts_once(pipeline, ledger):
    event = RewardEvent(source_id="dq-2024-01-01", exp_amount=20)

    first = pipeline.submit(event)
    second = pipeline.submit(event)

    assert first.applied
    assert second.status == RewardStatus.DUPLICATE
    assert second.level_change is None
    assert isinstance(second.error, DuplicateReward)
    assert ledger.current_exp == 20
    assert ledger.total_exp == 20


def test_negative_amount_rejected(pipeline, ledger):
    result = pipeline.submit(RewardEvent(source_id="bad", exp_amount=-5))

    assert result.status == RewardStatus.INVALID_AMOUNT
    assert ledger.current_exp == 0
    # A rejected reward does not use up its id
    assert not pipeline.is_consumed("bad")

    with pytest.raises(InvalidRewardAmount):
        result.raise_for_status()


def test_duplicate_checked_before_amount(pipeline):
    pipeline.submit(RewardEvent(source_id="q-1", exp_amount=10))
    result = pipeline.submit(RewardEvent(source_id="q-1", exp_amount=-10))
    assert result.status == RewardStatus.DUPLICATE


def test_zero_amount_consumes_id(pipeline):
    result = pipeline.submit(RewardEvent(source_id="noop", exp_amount=0))
    assert result.applied
    assert not result.level_change.changed
    assert pipeline.is_consumed("noop")


def test_raise_for_status_on_applied_is_noop(pipeline):
    pipeline.submit(RewardEvent(source_id="q-1", exp_amount=10)).raise_for_status()


def test_empty_source_id_is_invalid():
    with pytest.raises(ValidationError):
        RewardEvent(source_id="", exp_amount=10)


def test_resubmit_from_handler_is_duplicate(pipeline, ledger, dispatcher):
    results = []

    def on_exp_changed(event):
        results.append(pipeline.submit(RewardEvent(source_id="q-1", exp_amount=10)))

    dispatcher.subscribe(ProgressionEvent.EXP_CHANGED, on_exp_changed)
    pipeline.submit(RewardEvent(source_id="q-1", exp_amount=10))

    assert [r.status for r in results] == [RewardStatus.DUPLICATE]
    assert ledger.current_exp == 10


def test_ledger_failure_releases_id():
    class BrokenLedger:
        def add_exp(self, amount):
            raise RuntimeError("storage offline")

    pipeline = RewardPipeline(BrokenLedger())
    with pytest.raises(RuntimeError):
        pipeline.submit(RewardEvent(source_id="q-1", exp_amount=10))
    assert not pipeline.is_consumed("q-1")


def test_consumed_ids_restore_and_reset(ledger):
    pipeline = RewardPipeline(ledger, consumed=["old-1"])
    assert pipeline.submit(RewardEvent(source_id="old-1", exp_amount=5)).status == RewardStatus.DUPLICATE

    pipeline.restore_consumed(["a", "b"])
    assert pipeline.consumed_source_ids == frozenset({"a", "b"})
    assert not pipeline.is_consumed("old-1")

    pipeline.reset()
    assert pipeline.consumed_source_ids == frozenset()
