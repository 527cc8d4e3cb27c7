import json
import re
from typing import Any, Iterator

from doceat.core.errors import MalformedInput
from doceat.core.models import Chunk, ExtractedDocument, JsonLeaf

WS_RE = re.compile(r"\s+")

# path of a document whose JSON root is a bare scalar
ROOT_PATH = "$"


def normalize_whitespace(text: str) -> str:
    return WS_RE.sub(" ", text or "")


def chunk_text(text: str, chunk_size: int = 150, overlap: int = 25) -> list[Chunk]:
    """Fixed-stride windows over whitespace-normalized text.

    Window ``k`` starts at ``k * chunk_size`` and is extended ``overlap``
    characters to the left, so each chunk after the first repeats the tail
    of the previous one.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if not 0 <= overlap < chunk_size:
        raise ValueError("overlap must be >= 0 and smaller than chunk_size")

    words = normalize_whitespace(text)
    chunks: list[Chunk] = []
    for i in range(0, len(words), chunk_size):
        chunks.append(Chunk(
            chunk_index=len(chunks),
            content=words[max(i - overlap, 0):i + chunk_size],
        ))
    return chunks


def _leaf_content(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def iter_json_leaves(value: Any, max_depth: int = 64, _path: tuple[str, ...] = ()) -> Iterator[JsonLeaf]:
    """Depth-first walk yielding one leaf per non-null scalar.

    Object keys and array indices become dotted path segments.
    """
    if len(_path) > max_depth:
        raise MalformedInput(
            f"json nesting exceeds {max_depth} levels at {'.'.join(_path[:8])}...",
            public_message="The uploaded JSON file is nested too deeply.",
        )
    if isinstance(value, dict):
        for k, v in value.items():
            yield from iter_json_leaves(v, max_depth, _path + (str(k),))
    elif isinstance(value, list):
        for i, v in enumerate(value):
            yield from iter_json_leaves(v, max_depth, _path + (str(i),))
    elif value is None:
        return
    elif isinstance(value, (str, bool, int, float)):
        yield JsonLeaf(path=".".join(_path) if _path else ROOT_PATH, content=_leaf_content(value))
    else:
        raise MalformedInput(f"unexpected json value of type {type(value).__name__}")


def chunk_json(value: Any, max_depth: int = 64) -> list[Chunk]:
    return [
        Chunk(chunk_index=i, content=leaf)
        for i, leaf in enumerate(iter_json_leaves(value, max_depth))
    ]


def chunk_document(doc: ExtractedDocument, chunk_size: int = 150, overlap: int = 25, max_depth: int = 64) -> list[Chunk]:
    if doc.kind == "json":
        return chunk_json(doc.data, max_depth=max_depth)
    return chunk_text(doc.text or "", chunk_size=chunk_size, overlap=overlap)
