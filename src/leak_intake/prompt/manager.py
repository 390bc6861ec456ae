"""PromptManager — Jinja2-based prompt renderer for the analysis service.

Loads templates from the ``template/`` directory and renders the two
instructions the pipeline sends: the relevance pre-check and the report
generation request.  Closed-set answers are rendered with their localized
display labels, looked up through the step catalog.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import jinja2

from leak_intake.constants import NEGOTIATION_DELIMITER
from leak_intake.models.answers import AnswerSet
from leak_intake.models.report import Probability

if TYPE_CHECKING:
    from leak_intake.catalog import StepCatalog


# --- AnswerSet field -> English field name shown in the report prompt ---
# Order here is the order facts appear in the prompt.
_REPORT_FIELDS: dict[str, str] = {
    "location": "Location of leak",
    "symptoms": "Reported symptoms",
    "frequency": "When it happens",
    "upper_floor_relation": "Relation to the floor above",
    "repair_history": "Previous repairs",
    "building_type": "Building type",
    "building_age": "Building age",
    "leak_severity": "Leakage scale",
}

_NOT_PROVIDED = "미입력"


class PromptManager:
    """Jinja2-based prompt renderer.

    Args:
        catalog: loaded :class:`StepCatalog`, used for label lookup
        template_dir: optional override for the template directory.
            Defaults to ``template/`` sibling of this module.
    """

    def __init__(
        self,
        catalog: StepCatalog,
        template_dir: Path | None = None,
    ) -> None:
        if template_dir is None:
            template_dir = Path(__file__).parent / "template"
        self._catalog = catalog
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render(self, template_name: str, **context) -> str:
        """Render a named template with arbitrary context."""
        template = self._env.get_template(template_name)
        return template.render(**context)

    def render_relevance(self, photo_count: int) -> str:
        return self.render("relevance.jinja2", photo_count=photo_count)

    def render_report(self, answers: AnswerSet, photo_count: int) -> str:
        """Render the report instruction for a completed answer set."""
        return self.render(
            "report.jinja2",
            answers=self.describe_answers(answers),
            note=answers.freeform_note.strip(),
            photo_count=photo_count,
            probabilities=[p.value for p in Probability],
            delimiter=NEGOTIATION_DELIMITER,
        )

    def describe_answers(self, answers: AnswerSet) -> list[dict[str, str]]:
        """Localized ``{label, value}`` pairs for every closed-set answer."""
        items = []
        for field, title in _REPORT_FIELDS.items():
            value = getattr(answers, field)
            if field == "symptoms":
                rendered = ", ".join(
                    self._catalog.label(field, s.value) for s in answers.ordered_symptoms()
                )
            elif value is not None:
                rendered = self._catalog.label(field, value.value)
            else:
                rendered = ""
            items.append({"label": title, "value": rendered or _NOT_PROVIDED})
        return items
