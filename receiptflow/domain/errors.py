"""Failure taxonomy for the extraction boundary.

Validation warnings are not errors; they travel with the decoded receipt.
"""

from __future__ import annotations

CONTENT_SNIPPET_LENGTH = 200


class ExtractionError(RuntimeError):
    """Base class for failures that abort extraction of one receipt."""


class MissingCredentialError(ExtractionError):
    """Raised when no credential was supplied for the extraction service."""


class TransportError(ExtractionError):
    """Raised when the extraction service cannot be reached or times out."""


class ServiceRejectedError(ExtractionError):
    """Raised when the extraction service answers with a non-success status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    @property
    def is_retryable(self) -> bool:
        # 4xx other than rate limiting means the request itself is wrong.
        return self.status_code == 429 or self.status_code >= 500

    def __str__(self) -> str:
        return f"Extraction service rejected request ({self.status_code}): {self.message}"


class MalformedPayloadError(ExtractionError):
    """Raised when the service reply cannot be decoded into a receipt."""

    def __init__(self, detail: str, content: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.content = content

    def __str__(self) -> str:
        if self.content is None:
            return self.detail
        snippet = self.content[:CONTENT_SNIPPET_LENGTH]
        if len(self.content) > CONTENT_SNIPPET_LENGTH:
            snippet += "..."
        return f"{self.detail} (content: {snippet!r})"
