"""UnlockGate tests — ordering of channel click and confirmation."""

import pytest

from leak_intake.errors import ValidationError
from leak_intake.models.report import AnalysisResult
from leak_intake.unlock import GateState, UnlockGate

from helpers.mocks import valid_report_payload


@pytest.fixture
def result():
    return AnalysisResult.model_validate(valid_report_payload())


def test_starts_locked():
    gate = UnlockGate("http://example.test/channel")
    assert gate.locked
    assert gate.state is GateState.LOCKED
    assert gate.channel_action_taken is False


def test_confirm_without_click_rejected():
    gate = UnlockGate()
    with pytest.raises(ValidationError) as exc_info:
        gate.confirm()
    assert exc_info.value.user_message == "채널 추가를 먼저 진행해주세요."
    assert gate.locked


def test_click_then_confirm_unlocks():
    gate = UnlockGate("http://example.test/channel")
    assert gate.record_channel_click() == "http://example.test/channel"
    assert gate.locked
    gate.confirm()
    assert not gate.locked
    gate.confirm()
    assert gate.state is GateState.UNLOCKED


def test_reset_relocks_and_forgets_click():
    gate = UnlockGate()
    gate.record_channel_click()
    gate.confirm()
    gate.reset()
    assert gate.locked
    with pytest.raises(ValidationError):
        gate.confirm()


def test_locked_view_hides_premium_sections(result):
    view = UnlockGate().view(result)
    assert view.locked
    assert view.causes == []
    assert view.expert_guide_text is None
    assert view.negotiation_tips == []
    assert view.locked_sections == ["causes", "expert_guide_text", "negotiation_tips"]
    # Teaser fields stay visible
    assert view.risk_score == 72
    assert view.detection_cost_range == "25~45만 원"


def test_unlocked_view_shows_everything(result):
    gate = UnlockGate()
    gate.record_channel_click()
    gate.confirm()
    view = gate.view(result)
    assert not view.locked
    assert view.channel_action_taken
    assert view.causes[0].title == "윗집 배관 누수"
    assert view.negotiation_tips[0].red_flag == "눈으로만 봅니다"
    assert view.locked_sections == []
