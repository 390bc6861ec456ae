"""Exception taxonomy for the intake SDK.

Every exception carries a ``user_message`` that is safe to show to the end
user verbatim.  The ``str()`` of the exception holds internal detail for the
server log only.

    IntakeError
     ├── ValidationError            (also a ValueError; recoverable locally)
     │    └── UnsupportedMediaType
     ├── AnalysisInProgress
     ├── TransportError             (pipeline-internal -> FAILED outcome)
     ├── SchemaViolation            (pipeline-internal -> FAILED outcome)
     └── NotificationDeliveryError  (lead already persisted)
"""

from leak_intake.constants import (
    MSG_ANALYSIS_FAILED,
    MSG_ANALYSIS_IN_PROGRESS,
    MSG_SUBMISSION_FAILED,
    MSG_UNSUPPORTED_MEDIA,
)


class IntakeError(Exception):
    """Base class for all SDK errors."""

    default_user_message = "요청을 처리할 수 없습니다."

    def __init__(self, detail: str, user_message: str | None = None) -> None:
        super().__init__(detail)
        self.user_message = user_message or self.default_user_message


class ValidationError(IntakeError, ValueError):
    """Input rejected before any state change (phone, region, photos, gates)."""


class UnsupportedMediaType(ValidationError):
    """Uploaded file is not an accepted image type."""

    default_user_message = MSG_UNSUPPORTED_MEDIA


class AnalysisInProgress(IntakeError):
    """A second analysis was requested while one is still running."""

    default_user_message = MSG_ANALYSIS_IN_PROGRESS


class TransportError(IntakeError):
    """The generative service could not be reached or returned nothing."""

    default_user_message = MSG_ANALYSIS_FAILED


class SchemaViolation(IntakeError):
    """The generative service replied with a payload that breaks the contract."""

    default_user_message = MSG_ANALYSIS_FAILED


class NotificationDeliveryError(IntakeError):
    """The e-mail relay call failed after the lead was saved."""

    default_user_message = MSG_SUBMISSION_FAILED
