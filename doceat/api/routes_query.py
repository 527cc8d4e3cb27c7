import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from doceat.api.deps import get_document_service
from doceat.services.pipeline_service import DocumentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/query", tags=["query"])


class PromptRequest(BaseModel):
    fileName: str | None = None
    prompt: str | None = None


@router.post("/generateResponse")
async def generate_response(req: PromptRequest, service: DocumentService = Depends(get_document_service)):
    if not (req.fileName or "").strip() or not (req.prompt or "").strip():
        return JSONResponse(status_code=400, content={"message": "Please provide a valid input prompt"})

    try:
        result = await service.prompt_ai(req.fileName, req.prompt)
    except Exception:
        logger.exception("prompt against %s failed", req.fileName)
        return JSONResponse(
            status_code=500,
            content={"status": 500, "message": "There was an error while answering your prompt. Please try again later."},
        )

    if result.status != 200:
        return JSONResponse(
            status_code=result.status,
            content={"status": result.status, "message": result.message},
        )
    return {
        "status": result.status,
        "message": result.message,
        "response": result.response,
        "objects": [c.model_dump() for c in result.relevant_chunks],
    }
