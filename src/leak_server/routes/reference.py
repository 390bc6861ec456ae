"""Reference data endpoints — option labels and the active step list.

Read-only views over the step catalog.  They don't require authentication
since the data is public.
"""

from fastapi import APIRouter, Depends, Request

from leak_intake.catalog import StepCatalog

from leak_server.dependencies import get_catalog

router = APIRouter(prefix="/reference", tags=["reference"])


@router.get("/options")
def list_options(
    catalog: StepCatalog = Depends(get_catalog),
) -> dict[str, list[dict]]:
    """Every closed set with its display labels, in presentation order."""
    return {
        field: [o.model_dump(exclude_none=True) for o in catalog.options(field)]
        for field in catalog.labels
    }


@router.get("/flow")
def get_flow(
    request: Request,
    catalog: StepCatalog = Depends(get_catalog),
) -> list[dict]:
    """The configured flow's steps (kind, bound field, auto-advance)."""
    flow = request.app.state.settings.wizard_flow
    return [
        {
            "index": i,
            "step_id": step.step_id,
            "kind": step.kind,
            "field": step.field,
            "title": step.title,
            "auto_advance": step.auto_advance,
        }
        for i, step in enumerate(catalog.get_flow(flow))
    ]
