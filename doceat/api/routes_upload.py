import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import JSONResponse

from doceat.api.deps import get_document_service
from doceat.services.pipeline_service import DocumentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/uploads", tags=["uploads"])


@router.post("/uploadFile")
async def upload_file(
    file: UploadFile | None = File(None),
    service: DocumentService = Depends(get_document_service),
):
    original_name = Path((file.filename if file else "") or "").name
    if not original_name:
        return JSONResponse(status_code=400, content={"message": "Please provide a valid file"})

    try:
        content = await file.read()
        result = await service.upload(original_name, content)
    except Exception:
        logger.exception("upload of %s failed", original_name)
        return JSONResponse(
            status_code=500,
            content={"message": "There was an error while uploading your file. Please try again later."},
        )
    return JSONResponse(status_code=result.status, content={"message": result.message})
