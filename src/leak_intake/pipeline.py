"""AnalysisPipeline — orchestrates the calls into the generative service.

One pipeline instance belongs to one wizard session.  Each ``run()`` walks:

    IDLE ──► RELEVANCE_CHECKING ──► ANALYZING ──► SUCCEEDED
                   │    (optional)        │
                   ▼                      ▼
          RELEVANCE_REJECTED            FAILED

- The relevance gate sends the first photos with a minimal instruction and
  asks for ``{isRelevant: bool}``.  Any transport or parse failure *fails
  open*: the photos are treated as relevant and the report call proceeds.
- The report call sends the localized answers, the free-text note and the
  first few photos, declares the strict response schema, and validates the
  reply into an ``AnalysisResult``.  Transport errors, empty or malformed
  replies and schema mismatches all end in ``FAILED`` with one generic
  user message.

There is no caching, deduplication or automatic retry: every run issues a
fresh request.

Usage::

    pipeline = AnalysisPipeline(GeminiClient(...), PromptManager(catalog))
    outcome = await pipeline.run(answers)
    if outcome.state == "succeeded":
        report = pipeline.result
"""

from __future__ import annotations

import enum
import json
import logging

from pydantic import ValidationError as PydanticValidationError

from leak_intake.constants import (
    MSG_ANALYSIS_FAILED,
    MSG_PHOTOS_REQUIRED,
    MSG_RELEVANCE_REJECTED,
    RELEVANCE_PHOTO_LIMIT,
    REPORT_PHOTO_LIMIT,
)
from leak_intake.errors import (
    AnalysisInProgress,
    IntakeError,
    SchemaViolation,
    TransportError,
    ValidationError,
)
from leak_intake.interfaces import GenerativeClient
from leak_intake.models.answers import AnswerSet
from leak_intake.models.report import (
    RELEVANCE_RESPONSE_SCHEMA,
    REPORT_RESPONSE_SCHEMA,
    AnalysisResult,
    RelevanceVerdict,
)
from leak_intake.models.request import GenerationRequest
from leak_intake.models.session import AnalysisOutcome
from leak_intake.prompt import PromptManager

logger = logging.getLogger(__name__)


class PipelineState(str, enum.Enum):
    IDLE = "IDLE"
    RELEVANCE_CHECKING = "RELEVANCE_CHECKING"
    ANALYZING = "ANALYZING"
    SUCCEEDED = "SUCCEEDED"
    RELEVANCE_REJECTED = "RELEVANCE_REJECTED"
    FAILED = "FAILED"


_BUSY_STATES = {PipelineState.RELEVANCE_CHECKING, PipelineState.ANALYZING}


class AnalysisPipeline:
    """Relevance gate plus schema-constrained report generation.

    Args:
        client: the generative service client
        prompts: renders the relevance and report instructions
        relevance_enabled: run the relevance gate before the report call
    """

    def __init__(
        self,
        client: GenerativeClient,
        prompts: PromptManager,
        *,
        relevance_enabled: bool = True,
    ) -> None:
        self._client = client
        self._prompts = prompts
        self._relevance_enabled = relevance_enabled
        self.state = PipelineState.IDLE
        self.transitions: list[PipelineState] = [PipelineState.IDLE]
        self.result: AnalysisResult | None = None

    @property
    def busy(self) -> bool:
        return self.state in _BUSY_STATES

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------

    async def run(self, answers: AnswerSet) -> AnalysisOutcome:
        """Run the pipeline once on a completed answer snapshot.

        Raises:
            ValidationError: if ``answers`` has no photos; nothing is sent.
            AnalysisInProgress: if a run is already in flight.
        """
        if self.busy:
            raise AnalysisInProgress(f"Pipeline busy in state {self.state.value}")
        if not answers.photos:
            raise ValidationError("photos required", user_message=MSG_PHOTOS_REQUIRED)

        # Each run starts a fresh transition log.
        self.transitions = []
        self._transition(PipelineState.IDLE)
        self.result = None

        try:
            return await self._run_phases(answers)
        finally:
            # A cancelled run ends in FAILED so the session can retry.
            if self.busy:
                logger.warning("Analysis interrupted in state %s", self.state.value)
                self._transition(PipelineState.FAILED)

    def reset(self) -> None:
        """Drop the stored result and return to IDLE (wizard restart)."""
        self.state = PipelineState.IDLE
        self.transitions = [PipelineState.IDLE]
        self.result = None

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    async def _run_phases(self, answers: AnswerSet) -> AnalysisOutcome:
        if self._relevance_enabled:
            self._transition(PipelineState.RELEVANCE_CHECKING)
            if not await self._check_relevance(answers):
                self._transition(PipelineState.RELEVANCE_REJECTED)
                return self._outcome("relevance_rejected", MSG_RELEVANCE_REJECTED)

        self._transition(PipelineState.ANALYZING)
        try:
            self.result = await self._generate_report(answers)
        except IntakeError as exc:
            logger.error("Report generation failed: %s", exc)
            self._transition(PipelineState.FAILED)
            return self._outcome("failed", MSG_ANALYSIS_FAILED)
        except Exception:
            logger.exception("Unexpected error during report generation")
            self._transition(PipelineState.FAILED)
            return self._outcome("failed", MSG_ANALYSIS_FAILED)

        self._transition(PipelineState.SUCCEEDED)
        return self._outcome("succeeded", None)

    async def _check_relevance(self, answers: AnswerSet) -> bool:
        """Return the service's verdict, or ``True`` on any failure."""
        photos = answers.photos[:RELEVANCE_PHOTO_LIMIT]
        try:
            request = GenerationRequest(
                prompt=self._prompts.render_relevance(len(photos)),
                images=photos,
                response_schema=RELEVANCE_RESPONSE_SCHEMA,
            )
            raw = await self._client.generate(request)
            verdict = self._parse(raw, RelevanceVerdict)
        except IntakeError as exc:
            # Fail open.
            logger.warning("Relevance check failed, treating photos as relevant: %s", exc)
            return True
        except Exception:
            logger.warning("Relevance check errored, treating photos as relevant", exc_info=True)
            return True

        logger.info("Relevance verdict: %s", verdict.is_relevant)
        return verdict.is_relevant

    async def _generate_report(self, answers: AnswerSet) -> AnalysisResult:
        photos = answers.photos[:REPORT_PHOTO_LIMIT]
        request = GenerationRequest(
            prompt=self._prompts.render_report(answers, len(photos)),
            images=photos,
            response_schema=REPORT_RESPONSE_SCHEMA,
        )
        raw = await self._client.generate(request)
        return self._parse(raw, AnalysisResult)

    @staticmethod
    def _parse(raw: str, model_cls):
        """Decode ``raw`` as JSON and validate it into ``model_cls``.

        Raises:
            TransportError: on an empty reply.
            SchemaViolation: on invalid JSON or a contract mismatch.
        """
        if raw is None or not raw.strip():
            raise TransportError("Empty reply from generative service")
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise SchemaViolation(f"Reply is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise SchemaViolation(f"Reply is a {type(payload).__name__}, expected an object")
        try:
            return model_cls.model_validate(payload)
        except PydanticValidationError as exc:
            raise SchemaViolation(
                f"Reply violates {model_cls.__name__} schema: {exc.error_count()} error(s)"
            ) from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _transition(self, state: PipelineState) -> None:
        logger.info("Pipeline %s -> %s", self.state.value, state.value)
        self.state = state
        self.transitions.append(state)

    def _outcome(self, state: str, message: str | None) -> AnalysisOutcome:
        return AnalysisOutcome(
            state=state,
            message=message,
            transitions=[s.value for s in self.transitions],
        )
