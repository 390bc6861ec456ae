"""StepSequencer — the intake wizard's state machine over step indices.

The sequencer walks a configurable ordered list of step descriptors (see
``leak_intake.catalog``).  It owns the current ``AnswerSet`` and replaces it
on every change; answers are never mutated in place.

Step rules by descriptor kind:

    boolean_set      every hazard check ticked (sets ``safety_acknowledged``)
    single_select    a value is set; ``auto_advance`` steps move on selection
    multi_select     at least one value selected; explicit continue
    free_text        always allowed
    photo_collector  never advanced; ends with ``request_analysis()``

Usage::

    seq = StepSequencer(catalog.get_flow("full"))
    seq.set_hazard("EXPOSED_WIRING", True)
    ...
    seq.advance()                   # raises ValidationError while blocked
    seq.select("CEILING")           # auto-advance step: applies and moves
    ...
    seq.request_analysis()          # photo step, >= 1 photo
    assert seq.is_complete()
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from leak_intake.constants import (
    MAX_PHOTOS,
    MSG_PHOTOS_REQUIRED,
    MSG_SAFETY_REQUIRED,
    MSG_SELECTION_REQUIRED,
    MSG_SYMPTOMS_REQUIRED,
)
from leak_intake.errors import ValidationError
from leak_intake.models.answers import FIELD_ENUMS, AnswerSet, HazardCheck
from leak_intake.models.session import OptionPayload, WizardStep
from leak_intake.models.step import (
    BooleanSetStep,
    FreeTextStep,
    MultiSelectStep,
    PhotoStep,
    SingleSelectStep,
    StepDescriptor,
)

logger = logging.getLogger(__name__)


class StepSequencer:
    """Finite, linear state machine over a flow's step descriptors.

    Args:
        steps: ordered step descriptors; first is the safety gate, last is
            the photo collector (enforced by the catalog)
        answers: optional starting answers, defaults to an empty set
    """

    def __init__(
        self,
        steps: list[StepDescriptor],
        answers: AnswerSet | None = None,
    ) -> None:
        if not steps:
            raise ValueError("A flow needs at least one step")
        self._steps = list(steps)
        self._index = 0
        self._complete = False
        self.answers = answers if answers is not None else AnswerSet()

    # ------------------------------------------------------------------
    # Core contract
    # ------------------------------------------------------------------

    def current(self) -> int:
        return self._index

    @property
    def steps(self) -> list[StepDescriptor]:
        return list(self._steps)

    @property
    def total(self) -> int:
        return len(self._steps)

    @property
    def step(self) -> StepDescriptor:
        return self._steps[self._index]

    def is_complete(self) -> bool:
        return self._complete

    def advance(self, delta: dict[str, Any] | None = None) -> AnswerSet:
        """Apply ``delta`` to the answers, then move forward one step.

        The delta is kept even when the move is blocked, so a partially
        answered step is not lost.

        Raises:
            ValidationError: if the current step's requirement is unmet;
                the index does not change.
        """
        step = self.step
        if delta:
            try:
                self.answers = self.answers.replace(**self._coerce(delta, step))
            except PydanticValidationError as exc:
                raise ValidationError(
                    f"Invalid answer values: {exc.error_count()} error(s)",
                    user_message=MSG_SELECTION_REQUIRED,
                ) from exc
            self._sync_safety()

        if isinstance(step, PhotoStep):
            raise ValidationError(
                "photo_collector step cannot be advanced; use request_analysis()",
                user_message=MSG_PHOTOS_REQUIRED if not self.answers.photos else None,
            )
        self._check_requirement(step)

        self._index += 1
        logger.debug("Advanced to step %d (%s)", self._index, self.step.step_id)
        return self.answers

    def retreat(self) -> bool:
        """Move back one step.

        Returns ``False`` at step 0 so the caller can fall back to the
        screen-level navigation history instead.
        """
        if self._index == 0:
            return False
        self._index -= 1
        self._complete = False
        return True

    # ------------------------------------------------------------------
    # Interaction helpers
    # ------------------------------------------------------------------

    def set_hazard(self, check: str | HazardCheck, checked: bool) -> AnswerSet:
        """Tick or untick one safety-gate checkbox."""
        step = self.step
        if not isinstance(step, BooleanSetStep):
            raise ValidationError(f"Step '{step.step_id}' is not the safety gate")
        if check not in {o.id for o in step.options}:
            raise ValidationError(
                f"Unknown hazard check '{check}'",
                user_message=MSG_SAFETY_REQUIRED,
            )
        check = HazardCheck(check)
        checks = set(self.answers.hazard_checks)
        if checked:
            checks.add(check)
        else:
            checks.discard(check)
        self.answers = self.answers.replace(hazard_checks=frozenset(checks))
        self._sync_safety()
        return self.answers

    def select(self, option_id: str) -> AnswerSet:
        """Choose an option on a single-select step.

        Steps flagged ``auto_advance`` move forward in the same call.
        """
        step = self.step
        if not isinstance(step, SingleSelectStep):
            raise ValidationError(f"Step '{step.step_id}' is not single_select")
        self._check_option(step, option_id)
        self.answers = self.answers.replace(**{step.field: option_id})
        if step.auto_advance:
            return self.advance()
        return self.answers

    def toggle(self, option_id: str) -> AnswerSet:
        """Flip one option on a multi-select step."""
        step = self.step
        if not isinstance(step, MultiSelectStep):
            raise ValidationError(f"Step '{step.step_id}' is not multi_select")
        self._check_option(step, option_id)
        enum_cls = FIELD_ENUMS[step.field]
        selected = set(getattr(self.answers, step.field))
        value = enum_cls(option_id)
        if value in selected:
            selected.remove(value)
        else:
            selected.add(value)
        self.answers = self.answers.replace(**{step.field: frozenset(selected)})
        return self.answers

    def set_text(self, text: str) -> AnswerSet:
        step = self.step
        if not isinstance(step, FreeTextStep):
            raise ValidationError(f"Step '{step.step_id}' is not free_text")
        self.answers = self.answers.replace(**{step.field: text})
        return self.answers

    def set_answers(self, answers: AnswerSet) -> None:
        """Swap in an updated answer set (photo intake hands these back)."""
        self.answers = answers
        self._sync_safety()

    def request_analysis(self) -> AnswerSet:
        """Explicit "start analysis" action on the photo step.

        Returns the answer snapshot to hand to the pipeline.

        Raises:
            ValidationError: not on the photo step, or zero photos, or the
                safety gate is not acknowledged.
        """
        step = self.step
        if not isinstance(step, PhotoStep):
            raise ValidationError(f"Step '{step.step_id}' is not the photo step")
        if not self.answers.photos:
            raise ValidationError("photos required", user_message=MSG_PHOTOS_REQUIRED)
        if not self.answers.safety_acknowledged:
            raise ValidationError("safety gate not acknowledged", user_message=MSG_SAFETY_REQUIRED)
        self._complete = True
        return self.answers

    def rewind_to_photos(self) -> None:
        """Return to the photo step, keeping photos and clearing completion."""
        for i, step in enumerate(self._steps):
            if isinstance(step, PhotoStep):
                self._index = i
                break
        self._complete = False

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def current_step(self, message: str | None = None) -> WizardStep:
        """Build the render payload for the step the user is on."""
        step = self.step
        payload: dict[str, Any] = {
            "index": self._index,
            "total": len(self._steps),
            "step_id": step.step_id,
            "kind": step.kind,
            "title": step.title,
            "description": step.description,
            "auto_advance": step.auto_advance,
            "can_advance": self._requirement_met(step),
            "message": message,
        }

        if isinstance(step, (BooleanSetStep, SingleSelectStep, MultiSelectStep)):
            current = getattr(self.answers, step.field)
            if isinstance(current, frozenset):
                chosen = {v.value for v in current}
            elif current is not None:
                chosen = {current.value}
            else:
                chosen = set()
            payload["options"] = [
                OptionPayload(id=o.id, label=o.label, sub=o.sub, selected=o.id in chosen)
                for o in step.options
            ]
        elif isinstance(step, FreeTextStep):
            payload["text"] = getattr(self.answers, step.field)
            payload["placeholder"] = step.placeholder
        elif isinstance(step, PhotoStep):
            photos = self.answers.photos
            payload["photos"] = [p.data_url for p in photos]
            payload["max_photos"] = MAX_PHOTOS
            payload["can_add_photo"] = len(photos) < MAX_PHOTOS

        return WizardStep(**payload)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _safety_step(self) -> BooleanSetStep | None:
        first = self._steps[0]
        return first if isinstance(first, BooleanSetStep) else None

    def _sync_safety(self) -> None:
        """Recompute ``safety_acknowledged`` from the ticked hazard checks."""
        gate = self._safety_step()
        if gate is None:
            return
        required = {HazardCheck(o.id) for o in gate.options}
        acknowledged = required.issubset(self.answers.hazard_checks)
        if acknowledged != self.answers.safety_acknowledged:
            self.answers = self.answers.replace(safety_acknowledged=acknowledged)

    def _requirement_met(self, step: StepDescriptor) -> bool:
        if isinstance(step, BooleanSetStep):
            return self.answers.safety_acknowledged
        if isinstance(step, SingleSelectStep):
            return getattr(self.answers, step.field) is not None
        if isinstance(step, MultiSelectStep):
            return bool(getattr(self.answers, step.field))
        if isinstance(step, FreeTextStep):
            return True
        # Photo step: "can advance" means analysis may be requested
        return bool(self.answers.photos)

    def _check_requirement(self, step: StepDescriptor) -> None:
        if self._requirement_met(step):
            return
        if isinstance(step, BooleanSetStep):
            message = MSG_SAFETY_REQUIRED
        elif isinstance(step, MultiSelectStep):
            message = MSG_SYMPTOMS_REQUIRED
        else:
            message = MSG_SELECTION_REQUIRED
        raise ValidationError(
            f"Step '{step.step_id}' requirement unmet for field '{step.field}'",
            user_message=message,
        )

    @staticmethod
    def _check_option(step, option_id: str) -> None:
        if option_id not in {o.id for o in step.options}:
            raise ValidationError(
                f"Unknown option '{option_id}' for step '{step.step_id}'",
                user_message=MSG_SELECTION_REQUIRED,
            )

    @staticmethod
    def _coerce(delta: dict[str, Any], step: StepDescriptor) -> dict[str, Any]:
        """Accept only the field bound to ``step``.

        Hazard checks and photos have their own actions, so the safety and
        photo steps take no delta at all.
        """
        unknown = [k for k in delta if k not in AnswerSet.model_fields]
        if unknown:
            raise ValidationError(f"Unknown answer fields: {unknown}")
        allowed = set() if isinstance(step, (BooleanSetStep, PhotoStep)) else {step.field}
        foreign = sorted(set(delta) - allowed)
        if foreign:
            raise ValidationError(f"Step '{step.step_id}' cannot set fields {foreign}")
        return delta
