"""Domain errors.

Each error carries the HTTP-ish status the outer layer should report and a
message that is safe to hand back to a caller. The ``str()`` of the error
keeps the internal detail for logs.
"""

from __future__ import annotations


class DocEatError(Exception):
    status_code: int = 500
    public_message: str = "There was an error while processing your request. Please try again later."

    def __init__(self, detail: str | None = None, *, public_message: str | None = None):
        super().__init__(detail or self.public_message)
        if public_message is not None:
            self.public_message = public_message


class UnsupportedFormat(DocEatError):
    status_code = 415

    def __init__(self, extension: str):
        ext = extension or "(none)"
        super().__init__(
            f"Unsupported file extension: {ext}",
            public_message=f"Unsupported file extension: {ext}",
        )
        self.extension = extension


class MalformedInput(DocEatError):
    status_code = 422
    public_message = "The uploaded file could not be read."


class InvalidDocumentName(DocEatError):
    status_code = 400
    public_message = "Please provide a valid file name"


class StagingFileMissing(DocEatError):
    status_code = 404
    public_message = "The uploaded file could not be found."


class EmbeddingFailure(DocEatError):
    status_code = 502
    public_message = "The embedding service failed. Please try again later."


class GenerationFailure(DocEatError):
    status_code = 502
    public_message = "The language model failed to answer. Please try again later."


class StoreFailure(DocEatError):
    status_code = 500
    public_message = "There was an error while storing your file. Please try again later."

    def __init__(self, detail: str | None = None, *, failures: dict[int, str] | None = None):
        self.failures = dict(failures or {})
        if self.failures:
            failed = ", ".join(str(i) for i in sorted(self.failures))
            super().__init__(detail, public_message=f"Failed to insert chunks: {failed}")
        else:
            super().__init__(detail)


class NotFound(DocEatError):
    status_code = 404
    public_message = "Document not found. Please upload it first."
