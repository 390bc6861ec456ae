"""Photo endpoints — multipart upload and removal by index.

Uploads beyond the photo limit are ignored; the returned step reports
``can_add_photo: false`` once the limit is reached.
"""

from fastapi import APIRouter, Depends, File, UploadFile

from leak_intake.models.session import WizardStep
from leak_intake.wizard import WizardSession

from leak_server.dependencies import get_session

router = APIRouter(prefix="/sessions/current/photos", tags=["photos"])


@router.post("")
async def upload_photos(
    files: list[UploadFile] = File(...),
    session: WizardSession = Depends(get_session),
) -> WizardStep:
    """Attach one or more photos, in upload order.

    The first unsupported file aborts the request with 415; photos accepted
    before it are kept.
    """
    step = session.current_step()
    for upload in files:
        step = await session.add_photo(upload)
    return step


@router.delete("/{index}")
async def delete_photo(
    index: int,
    session: WizardSession = Depends(get_session),
) -> WizardStep:
    return session.remove_photo(index)
