"""Step descriptor models for the intake wizard.

Each descriptor kind maps to a specific UI component and advance rule:

    - boolean_set: hazard checkboxes; advance only when every box is ticked
    - single_select: pick one option; may auto-advance on selection
    - multi_select: pick one or more options; explicit continue required
    - free_text: optional note; continue is always allowed
    - photo_collector: photo upload; terminal step, ends with "start analysis"

The discriminated ``StepDescriptor`` union uses ``kind`` as its
discriminator.
"""

from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, Field


class Option(BaseModel):
    """A selectable option: id from the bound field's closed set plus a label."""

    id: str
    label: str
    sub: Optional[str] = None


class BaseStep(BaseModel):
    """Fields shared by all descriptor kinds."""

    step_id: str
    title: str
    # AnswerSet attribute this step writes to
    field: str
    auto_advance: bool = False
    description: Optional[str] = None


class BooleanSetStep(BaseStep):
    """Safety gate: a set of independent yes/no checks that must all be true."""

    kind: Literal["boolean_set"] = "boolean_set"
    options: List[Option]


class SingleSelectStep(BaseStep):
    kind: Literal["single_select"] = "single_select"
    options: List[Option]


class MultiSelectStep(BaseStep):
    kind: Literal["multi_select"] = "multi_select"
    options: List[Option]


class FreeTextStep(BaseStep):
    kind: Literal["free_text"] = "free_text"
    placeholder: Optional[str] = None


class PhotoStep(BaseStep):
    kind: Literal["photo_collector"] = "photo_collector"


StepDescriptor = Annotated[
    Union[
        BooleanSetStep,
        SingleSelectStep,
        MultiSelectStep,
        FreeTextStep,
        PhotoStep,
    ],
    Field(discriminator="kind"),
]

# Kinds whose descriptor carries an option list.
OPTION_KINDS = {"boolean_set", "single_select", "multi_select"}
