import io
import json
import logging

from doceat.core.errors import MalformedInput, UnsupportedFormat
from doceat.core.models import ExtractedDocument
from doceat.core.naming import file_extension

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".pdf", ".docx", ".txt", ".json")


def extract_pdf(data: bytes) -> str:
    from pypdf import PdfReader

    try:
        reader = PdfReader(io.BytesIO(data))
        parts = []
        for page in reader.pages:
            t = page.extract_text() or ""
            if t.strip():
                parts.append(t)
    except Exception as e:
        raise MalformedInput(f"cannot read pdf: {e}") from e
    return "\n\n".join(parts)


def extract_docx(data: bytes) -> str:
    from docx import Document as Docx

    try:
        d = Docx(io.BytesIO(data))
    except Exception as e:
        raise MalformedInput(f"cannot read docx: {e}") from e
    return "\n".join(para.text for para in d.paragraphs if para.text.strip())


def extract_txt(data: bytes) -> str:
    return data.decode("utf-8", errors="ignore")


def extract_json(data: bytes):
    try:
        return json.loads(data.decode("utf-8-sig"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedInput(f"invalid json: {e}", public_message="The uploaded JSON file is malformed.") from e
    except RecursionError as e:
        raise MalformedInput(
            "json nesting exceeds the parser recursion limit",
            public_message="The uploaded JSON file is nested too deeply.",
        ) from e


def extract_document(filename: str, data: bytes) -> ExtractedDocument:
    ext = file_extension(filename)
    if ext == ".pdf":
        text = extract_pdf(data)
    elif ext == ".docx":
        text = extract_docx(data)
    elif ext == ".txt":
        text = extract_txt(data)
    elif ext == ".json":
        return ExtractedDocument(kind="json", data=extract_json(data))
    else:
        raise UnsupportedFormat(ext)
    logger.debug("extracted %d characters from %s", len(text), filename)
    return ExtractedDocument(kind="text", text=text)
