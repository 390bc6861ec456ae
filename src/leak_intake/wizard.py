"""WizardSession and SessionRegistry — session-scoped intake state.

A ``WizardSession`` owns everything one user touches during a wizard run:
the step sequencer (and through it the ``AnswerSet``), the screen history,
the analysis pipeline, the unlock gate and the stored ``AnalysisResult``.
Nothing is shared between sessions.

``SessionRegistry`` keeps at most one session per user.  Creating a new one
tears the previous one down.

Usage::

    registry = SessionRegistry(catalog, client, flow="full")
    session = registry.create("user-1")

    step = session.current_step()
    step = session.set_hazard("EXPOSED_WIRING", True)
    ...
    step = await session.add_photo(upload)
    outcome = await session.start_analysis()
    view = session.report_view()
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from leak_intake import photos
from leak_intake.catalog import StepCatalog
from leak_intake.constants import DEFAULT_CHANNEL_URL
from leak_intake.errors import AnalysisInProgress, ValidationError
from leak_intake.interfaces import GenerativeClient
from leak_intake.models.report import AnalysisResult
from leak_intake.models.session import (
    AnalysisOutcome,
    NavigationState,
    ReportView,
    SessionInfo,
    WizardStep,
)
from leak_intake.navigation import USER_SCREENS, NavigationHistory, Screen
from leak_intake.pipeline import AnalysisPipeline
from leak_intake.prompt import PromptManager
from leak_intake.sequencer import StepSequencer
from leak_intake.unlock import UnlockGate

logger = logging.getLogger(__name__)

# Actions accepted by WizardSession.answer()
ANSWER_ACTIONS = {"select", "toggle", "text", "continue"}


class WizardSession:
    """One user's wizard run plus the screens around it.

    Args:
        user_id: caller identity
        flow: flow name the steps came from
        steps: ordered step descriptors for the flow
        pipeline: per-session analysis pipeline
        gate: per-session unlock gate
    """

    def __init__(
        self,
        user_id: str,
        *,
        flow: str,
        steps: list,
        pipeline: AnalysisPipeline,
        gate: UnlockGate,
    ) -> None:
        self.user_id = user_id
        self.session_id = uuid.uuid4().hex
        self.flow = flow
        self._steps = steps
        self.sequencer = StepSequencer(steps)
        self.navigation = NavigationHistory()
        self.pipeline = pipeline
        self.gate = gate
        self.result: AnalysisResult | None = None
        # Message shown above the current step (relevance rejection, failure)
        self._message: str | None = None
        self.created_at = datetime.now(timezone.utc)
        self.updated_at = self.created_at

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> WizardStep:
        """Fresh answers, sequencer, pipeline and gate; switch to the wizard."""
        self.sequencer = StepSequencer(self._steps)
        self.pipeline.reset()
        self.gate.reset()
        self.result = None
        self._message = None
        self.navigation.navigate_to(Screen.WIZARD)
        self._touch()
        return self.current_step()

    def info(self) -> SessionInfo:
        return SessionInfo(
            user_id=self.user_id,
            session_id=self.session_id,
            flow=self.flow,
            screen=self.navigation.screen.value,
            step_index=self.sequencer.current(),
            photo_count=len(self.sequencer.answers.photos),
            pipeline_state=self.pipeline.state.value,
            has_report=self.result is not None,
            unlocked=not self.gate.locked,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    # ------------------------------------------------------------------
    # Wizard steps
    # ------------------------------------------------------------------

    def current_step(self) -> WizardStep:
        return self.sequencer.current_step(message=self._message)

    def answer(self, action: str, value: Any = None) -> WizardStep:
        """Apply one interaction to the current step.

        ``select`` / ``toggle`` take an option id, ``text`` takes the note,
        ``continue`` advances (with an optional field delta dict).

        Raises:
            ValidationError: unknown action, bad value, or blocked advance.
        """
        if action not in ANSWER_ACTIONS:
            raise ValidationError(f"Unknown action '{action}'")
        seq = self.sequencer
        if action == "select":
            seq.select(str(value))
        elif action == "toggle":
            seq.toggle(str(value))
        elif action == "text":
            seq.set_text("" if value is None else str(value))
        else:
            if value is not None and not isinstance(value, dict):
                raise ValidationError("continue takes an optional field mapping")
            seq.advance(value)
            self._message = None
        self._touch()
        return self.current_step()

    def set_hazard(self, check: str, checked: bool) -> WizardStep:
        self.sequencer.set_hazard(check, checked)
        self._touch()
        return self.current_step()

    def back(self) -> WizardStep | NavigationState:
        """Previous step, or the previous screen when already on step 0."""
        self._touch()
        if self.sequencer.retreat():
            self._message = None
            return self.current_step()
        self.navigation.go_back()
        return self.navigation.state()

    # ------------------------------------------------------------------
    # Photos
    # ------------------------------------------------------------------

    async def add_photo(self, upload) -> WizardStep:
        answers, _ = await photos.add_photo(self.sequencer.answers, upload)
        self.sequencer.set_answers(answers)
        self._touch()
        return self.current_step()

    def remove_photo(self, index: int) -> WizardStep:
        self.sequencer.set_answers(photos.remove_photo(self.sequencer.answers, index))
        self._touch()
        return self.current_step()

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    async def start_analysis(self) -> AnalysisOutcome:
        """Hand the completed answers to the pipeline and map the outcome.

        Raises:
            ValidationError: not on the photo step, or no photos.
            AnalysisInProgress: a run is already in flight.
        """
        if self.pipeline.busy:
            raise AnalysisInProgress(f"Analysis already running for session {self.session_id}")
        answers = self.sequencer.request_analysis()
        self._message = None
        self.navigation.navigate_to(Screen.LOADING)
        try:
            outcome = await self.pipeline.run(answers)
        except BaseException:
            # Never leave LOADING on the back-stack.
            self.sequencer.rewind_to_photos()
            self.navigation.go_back()
            raise

        if outcome.state == "succeeded":
            self.result = self.pipeline.result
            self.gate.reset()
            self.navigation.replace(Screen.RESULT)
        else:
            self.sequencer.rewind_to_photos()
            self._message = outcome.message
            self.navigation.replace(Screen.WIZARD)
        self._touch()
        logger.info("Session %s analysis -> %s", self.session_id, outcome.state)
        return outcome

    # ------------------------------------------------------------------
    # Report & unlock
    # ------------------------------------------------------------------

    def report_view(self) -> ReportView:
        """Gated view of the stored report.

        Raises:
            ValueError: no report has been produced yet.
        """
        if self.result is None:
            raise ValueError(f"Report not found for session {self.session_id}")
        return self.gate.view(self.result)

    def channel_click(self) -> str:
        self._require_report()
        self._touch()
        return self.gate.record_channel_click()

    def confirm_unlock(self) -> ReportView:
        self._require_report()
        self.gate.confirm()
        self._touch()
        return self.report_view()

    # ------------------------------------------------------------------
    # Screens
    # ------------------------------------------------------------------

    def open_screen(self, screen: Screen | str) -> NavigationState:
        """Push one of the user-navigable screens.

        Raises:
            ValidationError: LOADING, RESULT, WIZARD and the admin dashboard
                are entered only by their own actions.
        """
        screen = Screen(screen)
        if screen not in USER_SCREENS:
            raise ValidationError(f"Screen {screen.value} cannot be opened directly")
        self.navigation.navigate_to(screen)
        self._touch()
        return self.navigation.state()

    def go_back(self) -> NavigationState:
        self.navigation.go_back()
        self._touch()
        return self.navigation.state()

    def _require_report(self) -> None:
        if self.result is None:
            raise ValueError(f"Report not found for session {self.session_id}")

    def _touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)


class SessionRegistry:
    """Holds at most one ``WizardSession`` per user.

    Args:
        catalog: loaded step catalog
        client: generative service client shared by all pipelines
        flow: flow name every new session uses
        relevance_enabled: passed through to each pipeline
        channel_url: passed through to each unlock gate
    """

    def __init__(
        self,
        catalog: StepCatalog,
        client: GenerativeClient,
        *,
        flow: str = "full",
        relevance_enabled: bool = True,
        channel_url: str = DEFAULT_CHANNEL_URL,
    ) -> None:
        if flow not in catalog.flows:
            raise ValueError(f"Flow '{flow}' not found in catalog")
        self._catalog = catalog
        self._client = client
        self._prompts = PromptManager(catalog)
        self._flow = flow
        self._relevance_enabled = relevance_enabled
        self._channel_url = channel_url
        self._sessions: dict[str, WizardSession] = {}

    @property
    def flow(self) -> str:
        return self._flow

    def create(self, user_id: str) -> WizardSession:
        """Tear down any existing session for ``user_id`` and start a new one."""
        if self._sessions.pop(user_id, None) is not None:
            logger.info("Replacing existing session for user %s", user_id)
        session = WizardSession(
            user_id,
            flow=self._flow,
            steps=self._catalog.get_flow(self._flow),
            pipeline=AnalysisPipeline(
                self._client,
                self._prompts,
                relevance_enabled=self._relevance_enabled,
            ),
            gate=UnlockGate(self._channel_url),
        )
        session.start()
        self._sessions[user_id] = session
        logger.info("Session %s created for user %s (flow=%s)", session.session_id, user_id, self._flow)
        return session

    def get(self, user_id: str) -> WizardSession:
        """Return the user's session.

        Raises:
            ValueError: if the user has no session.
        """
        session = self._sessions.get(user_id)
        if session is None:
            raise ValueError(f"No active session found for user {user_id}")
        return session

    def find(self, user_id: str) -> WizardSession | None:
        return self._sessions.get(user_id)

    def remove(self, user_id: str) -> None:
        """Tear down the user's session.

        Raises:
            ValueError: if the user has no session.
        """
        if self._sessions.pop(user_id, None) is None:
            raise ValueError(f"No active session found for user {user_id}")
        logger.info("Session torn down for user %s", user_id)

    def __len__(self) -> int:
        return len(self._sessions)
