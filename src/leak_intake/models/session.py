"""Session and step models — the contract between the SDK and API callers.

These models define what the wizard returns at each interaction.  They are
intentionally decoupled from the internal ``AnswerSet`` so that the UI only
receives what it needs to render.

View types:
  - WizardStep: the current step of the intake sequence
  - AnalysisOutcome: result of one "start analysis" action
  - ReportView: the stored report, with premium sections hidden while locked

Callers can dispatch on ``type``.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

from leak_intake.models.report import AnalysisResult, Cause, InsuranceGuidance, NegotiationTip


class OptionPayload(BaseModel):
    """Flattened option for rendering, with the current selection state."""

    id: str
    label: str
    sub: Optional[str] = None
    selected: bool = False


class WizardStep(BaseModel):
    """The step the user is on, plus everything needed to render it."""

    type: Literal["step"] = "step"
    index: int
    total: int
    step_id: str
    kind: str
    title: str
    description: str | None = None
    auto_advance: bool = False
    options: list[OptionPayload] | None = None
    # free_text steps: the current note
    text: str | None = None
    placeholder: str | None = None
    # photo_collector step: encoded data URLs and intake limits
    photos: list[str] | None = None
    max_photos: int | None = None
    can_add_photo: bool | None = None
    can_advance: bool
    # Inline message (e.g. relevance rejection) to show above the step
    message: str | None = None


class AnalysisOutcome(BaseModel):
    """Terminal state of one pipeline run, as reported to the caller."""

    type: Literal["analysis_outcome"] = "analysis_outcome"
    state: Literal["succeeded", "relevance_rejected", "failed"]
    message: str | None = None
    # Ordered list of pipeline states visited during the run
    transitions: list[str]


class ReportView(BaseModel):
    """Report screen payload.

    While the unlock gate is locked the premium fields are emptied and their
    names listed in ``locked_sections`` so the UI can render a blurred
    placeholder.
    """

    type: Literal["report"] = "report"
    locked: bool
    channel_action_taken: bool
    risk_score: int | None = None
    summary: str
    detection_cost_range: str
    overcharge_warning_threshold: str
    repair_cost_summary: str
    insurance_guidance: InsuranceGuidance
    causes: list[Cause] = []
    expert_guide_text: str | None = None
    negotiation_tips: list[NegotiationTip] = []
    locked_sections: list[str] = []

    @classmethod
    def from_result(
        cls,
        result: AnalysisResult,
        *,
        locked: bool,
        channel_action_taken: bool,
    ) -> "ReportView":
        view = cls(
            locked=locked,
            channel_action_taken=channel_action_taken,
            risk_score=result.risk_score,
            summary=result.summary,
            detection_cost_range=result.detection_cost_range,
            overcharge_warning_threshold=result.overcharge_warning_threshold,
            repair_cost_summary=result.repair_cost_summary,
            insurance_guidance=result.insurance_guidance,
        )
        if locked:
            view.locked_sections = ["causes", "expert_guide_text", "negotiation_tips"]
        else:
            view.causes = list(result.causes)
            view.expert_guide_text = result.expert_guide_text
            view.negotiation_tips = result.negotiation_tips
        return view


class NavigationState(BaseModel):
    """Current screen and back-stack depth."""

    screen: str
    depth: int
    scroll_epoch: int


class SessionInfo(BaseModel):
    """Public view of a wizard session."""

    user_id: str
    session_id: str
    flow: str
    screen: str
    step_index: int
    photo_count: int
    pipeline_state: str
    has_report: bool
    unlocked: bool
    created_at: datetime
    updated_at: datetime
