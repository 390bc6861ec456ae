"""UnlockGate — controls visibility of the premium report sections.

Unlocking takes two ordered actions: the user opens the external channel
link (recorded, never verified), then confirms.  The click is self-reported
by the client; nothing here can prove it happened.
"""

from __future__ import annotations

import enum
import logging

from leak_intake.constants import DEFAULT_CHANNEL_URL, MSG_CHANNEL_REQUIRED
from leak_intake.errors import ValidationError
from leak_intake.models.report import AnalysisResult
from leak_intake.models.session import ReportView

logger = logging.getLogger(__name__)


class GateState(str, enum.Enum):
    LOCKED = "LOCKED"
    UNLOCKED = "UNLOCKED"


class UnlockGate:
    def __init__(self, channel_url: str = DEFAULT_CHANNEL_URL) -> None:
        self._channel_url = channel_url
        self.state = GateState.LOCKED
        self.channel_action_taken = False

    @property
    def locked(self) -> bool:
        return self.state is GateState.LOCKED

    def record_channel_click(self) -> str:
        """Record the channel action and return the URL to open."""
        self.channel_action_taken = True
        return self._channel_url

    def confirm(self) -> None:
        """Flip to UNLOCKED.

        Raises:
            ValidationError: if no channel click has been recorded since the
                last reset.
        """
        if not self.channel_action_taken:
            raise ValidationError("Unlock confirmed before channel action", user_message=MSG_CHANNEL_REQUIRED)
        if self.state is not GateState.UNLOCKED:
            logger.info("Report unlocked")
        self.state = GateState.UNLOCKED

    def reset(self) -> None:
        """Back to LOCKED with no recorded click (fresh result or restart)."""
        self.state = GateState.LOCKED
        self.channel_action_taken = False

    def view(self, result: AnalysisResult) -> ReportView:
        return ReportView.from_result(
            result,
            locked=self.locked,
            channel_action_taken=self.channel_action_taken,
        )
