"""Public model re-exports for leak_intake.

Consumers should import from ``leak_intake.models`` rather than reaching into
sub-modules directly.
"""

# --- Answers ---
from leak_intake.models.answers import (
    FIELD_ENUMS,
    AnswerSet,
    BuildingAge,
    BuildingType,
    EncodedImage,
    Frequency,
    HazardCheck,
    LeakLocation,
    LeakSeverity,
    RepairHistory,
    Symptom,
    UpperFloorRelation,
)

# --- Leads ---
from leak_intake.models.lead import Lead, LeadStatus

# --- Outbound requests ---
from leak_intake.models.request import GenerationRequest, NotificationPayload

# --- Report ---
from leak_intake.models.report import (
    REPORT_RESPONSE_SCHEMA,
    RELEVANCE_RESPONSE_SCHEMA,
    AnalysisResult,
    Cause,
    InsuranceGuidance,
    NegotiationTip,
    Probability,
    RelevanceVerdict,
)

# --- Session / views ---
from leak_intake.models.session import (
    AnalysisOutcome,
    NavigationState,
    OptionPayload,
    ReportView,
    SessionInfo,
    WizardStep,
)

# --- Step descriptors ---
from leak_intake.models.step import (
    BaseStep,
    BooleanSetStep,
    FreeTextStep,
    MultiSelectStep,
    Option,
    PhotoStep,
    SingleSelectStep,
    StepDescriptor,
)

__all__ = [
    # Answers
    "FIELD_ENUMS",
    "AnswerSet",
    "BuildingAge",
    "BuildingType",
    "EncodedImage",
    "Frequency",
    "HazardCheck",
    "LeakLocation",
    "LeakSeverity",
    "RepairHistory",
    "Symptom",
    "UpperFloorRelation",
    # Leads
    "Lead",
    "LeadStatus",
    # Requests
    "GenerationRequest",
    "NotificationPayload",
    # Report
    "REPORT_RESPONSE_SCHEMA",
    "RELEVANCE_RESPONSE_SCHEMA",
    "AnalysisResult",
    "Cause",
    "InsuranceGuidance",
    "NegotiationTip",
    "Probability",
    "RelevanceVerdict",
    # Session
    "AnalysisOutcome",
    "NavigationState",
    "OptionPayload",
    "ReportView",
    "SessionInfo",
    "WizardStep",
    # Steps
    "BaseStep",
    "BooleanSetStep",
    "FreeTextStep",
    "MultiSelectStep",
    "Option",
    "PhotoStep",
    "SingleSelectStep",
    "StepDescriptor",
]
