"""StepCatalog — loads the wizard flows and option labels from YAML.

This is the single source of truth for step configuration at runtime.  The
catalog is loaded once at startup and provides the ordered step list for a
named flow plus label lookup for every closed set.

Usage::

    catalog = StepCatalog()         # defaults to the bundled catalog/ dir
    catalog.load()                  # parse labels.yaml and flows/*.yaml

    steps = catalog.get_flow("full")
    label = catalog.label("location", "CEILING")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter

from leak_intake.constants import MIN_HAZARD_CHECKS
from leak_intake.models.answers import FIELD_ENUMS, AnswerSet
from leak_intake.models.step import (
    OPTION_KINDS,
    BooleanSetStep,
    Option,
    PhotoStep,
    StepDescriptor,
)

logger = logging.getLogger(__name__)

_DEFAULT_DIR = Path(__file__).parent / "catalog"

_step_adapter = TypeAdapter(StepDescriptor)


def load_yaml(path: Path | str) -> Any:
    """Load a single YAML file and return the parsed contents."""
    if isinstance(path, str):
        path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Missing YAML file: {path}")
    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


class StepCatalog:
    """Loads ``labels.yaml`` and ``flows/*.yaml`` and provides typed lookup.

    Attributes populated after :meth:`load`:

        labels — dict[field, list[Option]] in presentation order
        flows  — dict[flow_name, list[StepDescriptor]]
    """

    def __init__(self, catalog_dir: str | Path | None = None) -> None:
        self._base = Path(catalog_dir) if catalog_dir is not None else _DEFAULT_DIR

        # Populated by load()
        self.labels: dict[str, list[Option]] = {}
        self.flows: dict[str, list[StepDescriptor]] = {}

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load(self) -> None:
        """Parse all YAML files under the catalog directory.

        Raises ``FileNotFoundError`` if expected files are missing and
        ``ValueError`` if a flow breaks the structural rules.
        """
        self._load_labels()
        self._load_flows()
        logger.info(
            "StepCatalog loaded: %d label sets, flows=%s",
            len(self.labels),
            {name: len(steps) for name, steps in self.flows.items()},
        )

    def _load_labels(self) -> None:
        raw = load_yaml(self._base / "labels.yaml")
        for field, options in raw.items():
            self.labels[field] = [Option(**o) for o in options]

    def _load_flows(self) -> None:
        flow_dir = self._base / "flows"
        for path in sorted(flow_dir.glob("*.yaml")):
            raw_steps = load_yaml(path)
            steps = [self._parse_step(path.stem, raw) for raw in raw_steps]
            self._validate_flow(path.stem, steps)
            self.flows[path.stem] = steps

    def _parse_step(self, flow: str, raw: dict) -> StepDescriptor:
        """Build a descriptor, filling the option list from labels.yaml."""
        raw = dict(raw)
        kind = raw.get("kind")
        if kind in OPTION_KINDS and "options" not in raw:
            field = raw.get("field")
            if field not in self.labels:
                raise ValueError(f"No labels for field '{field}' in flow '{flow}'")
            raw["options"] = [o.model_dump() for o in self.labels[field]]
        return _step_adapter.validate_python(raw)

    @staticmethod
    def _validate_flow(flow: str, steps: list[StepDescriptor]) -> None:
        """Enforce the structural rules every flow must satisfy.

        - first step is the boolean_set safety gate with enough hazard checks
        - last step is the photo collector, and it appears exactly once
        - every bound field exists on AnswerSet and is bound at most once
        - option ids belong to the bound field's closed set
        """
        if not steps:
            raise ValueError(f"Flow '{flow}' has no steps")

        first = steps[0]
        if not isinstance(first, BooleanSetStep) or first.field != "hazard_checks":
            raise ValueError(f"Flow '{flow}' must start with the hazard_checks safety gate")
        if len(first.options) < MIN_HAZARD_CHECKS:
            raise ValueError(
                f"Flow '{flow}' safety gate needs at least {MIN_HAZARD_CHECKS} checks"
            )

        if not isinstance(steps[-1], PhotoStep):
            raise ValueError(f"Flow '{flow}' must end with the photo_collector step")
        if sum(isinstance(s, PhotoStep) for s in steps) != 1:
            raise ValueError(f"Flow '{flow}' must contain exactly one photo_collector step")

        seen_fields: set[str] = set()
        seen_ids: set[str] = set()
        for step in steps:
            if step.field not in AnswerSet.model_fields:
                raise ValueError(f"Flow '{flow}' step '{step.step_id}' binds unknown field '{step.field}'")
            if step.field in seen_fields:
                raise ValueError(f"Flow '{flow}' binds field '{step.field}' more than once")
            if step.step_id in seen_ids:
                raise ValueError(f"Flow '{flow}' has duplicate step_id '{step.step_id}'")
            seen_fields.add(step.field)
            seen_ids.add(step.step_id)

            if step.kind in OPTION_KINDS:
                allowed = {e.value for e in FIELD_ENUMS[step.field]}
                unknown = [o.id for o in step.options if o.id not in allowed]
                if unknown:
                    raise ValueError(
                        f"Flow '{flow}' step '{step.step_id}' has unknown option ids {unknown}"
                    )

    # ------------------------------------------------------------------
    # Lookup helpers
    # ------------------------------------------------------------------

    def get_flow(self, name: str) -> list[StepDescriptor]:
        """Return the ordered step list for a flow.

        Raises:
            KeyError: if the flow is not defined.
        """
        return self.flows[name]

    def label(self, field: str, option_id: str) -> str:
        """Look up the display label for an option id; falls back to the id."""
        for option in self.labels.get(field, []):
            if option.id == option_id:
                return option.label
        return option_id

    def options(self, field: str) -> list[Option]:
        return self.labels.get(field, [])
