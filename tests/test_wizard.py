"""WizardSession / SessionRegistry tests — end-to-end runs over the SDK.

Walks the full flow through the session facade the way the HTTP layer
drives it: hazards, answers, photo uploads, analysis, unlock and screen
navigation.
"""

import asyncio
import json

import pytest

from leak_intake.constants import MAX_PHOTOS, MSG_ANALYSIS_FAILED, MSG_RELEVANCE_REJECTED
from leak_intake.errors import AnalysisInProgress, UnsupportedMediaType, ValidationError
from leak_intake.models.answers import HazardCheck
from leak_intake.models.session import NavigationState, WizardStep
from leak_intake.navigation import Screen
from leak_intake.wizard import SessionRegistry

from helpers.mocks import BlockingGenerativeClient, FakeUpload, StubGenerativeClient


# =====================================================================
# Helpers
# =====================================================================


def _registry(catalog, client=None, **kwargs) -> SessionRegistry:
    return SessionRegistry(
        catalog,
        client or StubGenerativeClient(),
        channel_url="http://example.test/channel",
        **kwargs,
    )


def _walk_to_photos(session) -> WizardStep:
    for check in HazardCheck:
        session.set_hazard(check.value, True)
    session.answer("continue")
    for option in ["CEILING", "RECURRING", "YES", "ONCE", "VILLA"]:
        session.answer("select", option)
    session.answer("toggle", "DRIPPING")
    session.answer("continue")
    session.answer("select", "LARGE")
    session.answer("text", "세면대 아래가 젖어 있어요")
    return session.answer("continue")


# =====================================================================
# Registry
# =====================================================================


class TestRegistry:

    def test_create_starts_on_wizard(self, catalog):
        registry = _registry(catalog)
        session = registry.create("u1")
        assert session.navigation.screen is Screen.WIZARD
        assert session.current_step().step_id == "safety"
        assert registry.get("u1") is session
        assert len(registry) == 1

    def test_create_replaces_existing(self, catalog):
        registry = _registry(catalog)
        first = registry.create("u1")
        second = registry.create("u1")
        assert first.session_id != second.session_id
        assert registry.get("u1") is second
        assert len(registry) == 1

    def test_sessions_are_isolated(self, catalog):
        registry = _registry(catalog)
        a = registry.create("a")
        b = registry.create("b")
        a.set_hazard("EXPOSED_WIRING", True)
        assert b.sequencer.answers.hazard_checks == frozenset()

    def test_get_missing(self, catalog):
        registry = _registry(catalog)
        with pytest.raises(ValueError, match="No active session"):
            registry.get("ghost")
        assert registry.find("ghost") is None

    def test_remove(self, catalog):
        registry = _registry(catalog)
        registry.create("u1")
        registry.remove("u1")
        assert len(registry) == 0
        with pytest.raises(ValueError):
            registry.remove("u1")

    def test_unknown_flow(self, catalog):
        with pytest.raises(ValueError, match="not found"):
            _registry(catalog, flow="express")

    def test_compact_flow(self, catalog):
        session = _registry(catalog, flow="compact").create("u1")
        assert session.current_step().total == 6
        assert session.info().flow == "compact"


# =====================================================================
# Wizard interaction
# =====================================================================


class TestAnswers:

    def test_walkthrough_reaches_photos(self, catalog):
        session = _registry(catalog).create("u1")
        step = _walk_to_photos(session)
        assert step.step_id == "photos"
        assert step.kind == "photo_collector"
        assert step.can_advance is False
        assert session.info().step_index == 9

    def test_unknown_action(self, catalog):
        session = _registry(catalog).create("u1")
        with pytest.raises(ValidationError):
            session.answer("skip")

    def test_continue_rejects_non_mapping(self, catalog):
        session = _registry(catalog).create("u1")
        with pytest.raises(ValidationError):
            session.answer("continue", ["location"])

    def test_back_through_steps_then_screen(self, catalog):
        session = _registry(catalog).create("u1")
        for check in HazardCheck:
            session.set_hazard(check.value, True)
        session.answer("continue")

        step = session.back()
        assert isinstance(step, WizardStep)
        assert step.step_id == "safety"

        nav = session.back()
        assert isinstance(nav, NavigationState)
        assert nav.screen == "LANDING"

    @pytest.mark.asyncio
    async def test_photo_limit_and_removal(self, catalog):
        session = _registry(catalog).create("u1")
        _walk_to_photos(session)
        for _ in range(MAX_PHOTOS + 2):
            step = await session.add_photo(FakeUpload())
        assert len(step.photos) == MAX_PHOTOS
        assert step.can_add_photo is False

        step = session.remove_photo(0)
        assert len(step.photos) == MAX_PHOTOS - 1
        assert step.can_add_photo is True

    @pytest.mark.asyncio
    async def test_non_image_upload(self, catalog):
        session = _registry(catalog).create("u1")
        with pytest.raises(UnsupportedMediaType):
            await session.add_photo(FakeUpload(b"hello", content_type="text/plain", filename="a.txt"))


# =====================================================================
# Analysis and report
# =====================================================================


class TestAnalysis:

    @pytest.mark.asyncio
    async def test_success_opens_locked_report(self, catalog):
        session = _registry(catalog).create("u1")
        _walk_to_photos(session)
        await session.add_photo(FakeUpload())

        outcome = await session.start_analysis()

        assert outcome.state == "succeeded"
        assert session.navigation.screen is Screen.RESULT
        view = session.report_view()
        assert view.locked
        assert view.risk_score == 72
        assert session.info().has_report

    @pytest.mark.asyncio
    async def test_back_from_report_skips_loading(self, catalog):
        session = _registry(catalog).create("u1")
        _walk_to_photos(session)
        await session.add_photo(FakeUpload())
        await session.start_analysis()

        assert session.go_back().screen == "WIZARD"

    @pytest.mark.asyncio
    async def test_second_start_while_running_keeps_screens(self, catalog):
        client = BlockingGenerativeClient()
        session = _registry(catalog, client).create("u1")
        _walk_to_photos(session)
        await session.add_photo(FakeUpload())

        first = asyncio.create_task(session.start_analysis())
        while not session.pipeline.busy:
            await asyncio.sleep(0)
        depth = session.navigation.state().depth

        with pytest.raises(AnalysisInProgress):
            await session.start_analysis()
        assert session.navigation.state().depth == depth

        client.release.set()
        assert (await first).state == "succeeded"
        assert session.navigation.screen is Screen.RESULT
        assert session.go_back().screen == "WIZARD"

    @pytest.mark.asyncio
    async def test_cancelled_start_leaves_loading(self, catalog):
        client = BlockingGenerativeClient()
        session = _registry(catalog, client).create("u1")
        _walk_to_photos(session)
        await session.add_photo(FakeUpload())

        task = asyncio.create_task(session.start_analysis())
        while not session.pipeline.busy:
            await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert session.navigation.screen is Screen.WIZARD
        assert session.current_step().step_id == "photos"
        assert not session.pipeline.busy

    @pytest.mark.asyncio
    async def test_zero_photos_blocked(self, catalog):
        client = StubGenerativeClient()
        session = _registry(catalog, client).create("u1")
        _walk_to_photos(session)

        with pytest.raises(ValidationError):
            await session.start_analysis()
        assert client.requests == []
        assert session.navigation.screen is Screen.WIZARD

    @pytest.mark.asyncio
    async def test_rejection_returns_to_photo_step(self, catalog):
        client = StubGenerativeClient(relevance='{"isRelevant": false}')
        session = _registry(catalog, client).create("u1")
        _walk_to_photos(session)
        await session.add_photo(FakeUpload())
        await session.add_photo(FakeUpload())

        outcome = await session.start_analysis()

        assert outcome.state == "relevance_rejected"
        assert session.navigation.screen is Screen.WIZARD
        step = session.current_step()
        assert step.step_id == "photos"
        assert step.message == MSG_RELEVANCE_REJECTED
        assert len(step.photos) == 2
        with pytest.raises(ValueError, match="Report not found"):
            session.report_view()

    @pytest.mark.asyncio
    async def test_failure_message_then_retry(self, catalog):
        client = StubGenerativeClient(report="not json")
        session = _registry(catalog, client).create("u1")
        _walk_to_photos(session)
        await session.add_photo(FakeUpload())

        outcome = await session.start_analysis()
        assert outcome.state == "failed"
        assert session.current_step().message == MSG_ANALYSIS_FAILED

        client.report = json.dumps({"summary": "still broken"})
        assert (await session.start_analysis()).state == "failed"

    @pytest.mark.asyncio
    async def test_unlock_flow(self, catalog):
        session = _registry(catalog).create("u1")
        _walk_to_photos(session)
        await session.add_photo(FakeUpload())
        await session.start_analysis()

        with pytest.raises(ValidationError):
            session.confirm_unlock()
        assert session.channel_click() == "http://example.test/channel"
        view = session.confirm_unlock()
        assert not view.locked
        assert view.causes
        assert session.info().unlocked

    def test_unlock_without_report(self, catalog):
        session = _registry(catalog).create("u1")
        with pytest.raises(ValueError, match="Report not found"):
            session.channel_click()

    @pytest.mark.asyncio
    async def test_restart_clears_everything(self, catalog):
        registry = _registry(catalog)
        session = registry.create("u1")
        _walk_to_photos(session)
        await session.add_photo(FakeUpload())
        await session.start_analysis()
        session.channel_click()
        session.confirm_unlock()

        session.start()
        info = session.info()
        assert info.step_index == 0
        assert info.photo_count == 0
        assert not info.has_report
        assert not info.unlocked
        assert info.pipeline_state == "IDLE"


# =====================================================================
# Screens
# =====================================================================


def test_open_screen_and_back(catalog):
    session = _registry(catalog).create("u1")
    state = session.open_screen("INSURANCE_GUIDE")
    assert state.screen == "INSURANCE_GUIDE"
    assert state.depth == 2
    assert session.go_back().screen == "WIZARD"


@pytest.mark.parametrize("screen", ["LOADING", "RESULT", "WIZARD", "ADMIN_DASHBOARD"])
def test_action_screens_cannot_be_opened(catalog, screen):
    session = _registry(catalog).create("u1")
    with pytest.raises(ValidationError):
        session.open_screen(screen)
    state = session.navigation.state()
    assert state.screen == "WIZARD"
    assert state.depth == 1
