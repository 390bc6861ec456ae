"""leak_intake — Water-leak intake wizard and AI report SDK.

Public API:
    StepCatalog      — loads step flows and option labels from YAML
    StepSequencer    — state machine over a flow's step descriptors
    NavigationHistory — screen-level back-stack (see ``Screen``)
    AnalysisPipeline — relevance gate + schema-constrained report generation
    UnlockGate       — locked/unlocked visibility of premium report sections
    LeadLedger       — consultation requests persisted under a fixed key
    WizardSession    — session-scoped state owning all of the above
    SessionRegistry  — one WizardSession per user
    PromptManager    — Jinja2 renderer for the service instructions

External collaborators:
    GenerativeClient  — ABC for the generative analysis service
    GeminiClient      — google-genai implementation
    NotificationRelay — ABC for the e-mail relay
    EmailJSRelay      — EmailJS REST implementation

Photo intake:
    add_photo / remove_photo — async upload encoding and removal by index
"""

from leak_intake.catalog import StepCatalog
from leak_intake.gemini import GeminiClient
from leak_intake.interfaces import GenerativeClient, NotificationRelay
from leak_intake.ledger import LeadLedger, format_phone_number
from leak_intake.navigation import NavigationHistory, Screen
from leak_intake.photos import add_photo, remove_photo
from leak_intake.pipeline import AnalysisPipeline, PipelineState
from leak_intake.prompt import PromptManager
from leak_intake.relay import EmailJSRelay
from leak_intake.sequencer import StepSequencer
from leak_intake.unlock import GateState, UnlockGate
from leak_intake.wizard import SessionRegistry, WizardSession

__all__ = [
    # Catalog & sequencing
    "StepCatalog",
    "StepSequencer",
    "NavigationHistory",
    "Screen",
    # Session
    "WizardSession",
    "SessionRegistry",
    # Photos
    "add_photo",
    "remove_photo",
    # Analysis
    "AnalysisPipeline",
    "PipelineState",
    "PromptManager",
    # Report gate
    "UnlockGate",
    "GateState",
    # Leads
    "LeadLedger",
    "format_phone_number",
    # Collaborators
    "GenerativeClient",
    "GeminiClient",
    "NotificationRelay",
    "EmailJSRelay",
]
