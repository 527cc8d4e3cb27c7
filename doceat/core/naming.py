import re
from pathlib import PurePath

from doceat.core.errors import InvalidDocumentName

_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")


def file_extension(filename: str) -> str:
    return PurePath(filename).suffix.lower()


def sanitize_document_name(filename: str) -> str:
    """Map a file name to the collection name of its document.

    ``Motive.pdf``, ``Motive`` and ``motive.txt`` all map to ``Motive``;
    ``my report.v2.docx`` maps to ``My_report_v2``.
    """
    name = PurePath((filename or "").replace("\\", "/")).name
    stem, dot, _ext = name.rpartition(".")
    if dot and stem:
        name = stem
    name = _NON_ALNUM_RE.sub("_", name)
    if not name:
        raise InvalidDocumentName(f"cannot derive a collection name from {filename!r}")
    return name[0].upper() + name[1:]
