"""Report models — the contract with the generative analysis service.

``AnalysisResult`` and ``RelevanceVerdict`` are validated directly from the
service's JSON reply.  Field aliases follow the camelCase names declared in
the response schema; Python code uses the snake_case attribute names.

Validation is the pipeline's only line of defence against a misbehaving
service, so the models are strict about the closed sets: a ``probability``
outside {High, Medium, Low}, a missing required field or an out-of-range
``riskScore`` raises ``pydantic.ValidationError``.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from leak_intake.constants import NEGOTIATION_DELIMITER


class Probability(str, enum.Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class _ServiceModel(BaseModel):
    """Base for models parsed from service JSON (camelCase on the wire)."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Cause(_ServiceModel):
    probability: Probability
    title: str
    description: str


class InsuranceGuidance(_ServiceModel):
    probability: Probability
    required_documents: list[str] = Field(alias="requiredDocuments")
    disclaimer: str


class NegotiationTip(BaseModel):
    """One negotiation checklist entry, split into its three parts."""

    question: str
    red_flag: str = ""
    rationale: str = ""


class AnalysisResult(_ServiceModel):
    """Structured diagnostic report produced by one successful pipeline run."""

    risk_score: int | None = Field(default=None, alias="riskScore", ge=0, le=100, strict=True)
    summary: str
    detection_cost_range: str = Field(alias="detectionCostRange")
    overcharge_warning_threshold: str = Field(alias="overchargeWarningThreshold")
    repair_cost_summary: str = Field(alias="repairCostSummary")
    # Order matters: most likely cause first, as returned by the service.
    causes: list[Cause]
    expert_guide_text: str | None = Field(default=None, alias="expertGuideText")
    negotiation_checklist: list[str] = Field(alias="negotiationChecklist")
    insurance_guidance: InsuranceGuidance = Field(alias="insuranceGuidance")

    @property
    def negotiation_tips(self) -> list[NegotiationTip]:
        """Checklist entries split on the delimiter into question/red flag/rationale."""
        tips = []
        for entry in self.negotiation_checklist:
            parts = [p.strip() for p in entry.split(NEGOTIATION_DELIMITER)]
            parts += [""] * (3 - len(parts))
            tips.append(NegotiationTip(
                question=parts[0],
                red_flag=parts[1],
                # Extra delimiters belong to the rationale text.
                rationale=NEGOTIATION_DELIMITER.join(parts[2:]),
            ))
        return tips


class RelevanceVerdict(_ServiceModel):
    """Reply shape of the cheap relevance pre-check."""

    is_relevant: bool = Field(alias="isRelevant", strict=True)


# --- Response schemas declared to the service ---
# Expressed in the OpenAPI subset the generative service accepts.

_STRING = {"type": "STRING"}
_STRING_LIST = {"type": "ARRAY", "items": _STRING}
_PROBABILITY = {
    "type": "STRING",
    "enum": [p.value for p in Probability],
}

REPORT_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "riskScore": {"type": "INTEGER"},
        "summary": _STRING,
        "detectionCostRange": _STRING,
        "overchargeWarningThreshold": _STRING,
        "repairCostSummary": _STRING,
        "causes": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "probability": _PROBABILITY,
                    "title": _STRING,
                    "description": _STRING,
                },
                "required": ["probability", "title", "description"],
            },
        },
        "expertGuideText": _STRING,
        "negotiationChecklist": _STRING_LIST,
        "insuranceGuidance": {
            "type": "OBJECT",
            "properties": {
                "probability": _PROBABILITY,
                "requiredDocuments": _STRING_LIST,
                "disclaimer": _STRING,
            },
            "required": ["probability", "requiredDocuments", "disclaimer"],
        },
    },
    "required": [
        "riskScore",
        "summary",
        "detectionCostRange",
        "overchargeWarningThreshold",
        "repairCostSummary",
        "causes",
        "negotiationChecklist",
        "insuranceGuidance",
    ],
}

RELEVANCE_RESPONSE_SCHEMA: dict[str, Any] = {
    "type": "OBJECT",
    "properties": {"isRelevant": {"type": "BOOLEAN"}},
    "required": ["isRelevant"],
}
