"""Extraction service client: the only network boundary of the pipeline."""

from __future__ import annotations

import time
from typing import Any, Protocol

import httpx

from receiptflow.domain.errors import (
    MalformedPayloadError,
    MissingCredentialError,
    ServiceRejectedError,
    TransportError,
)
from receiptflow.receipt.composer import ExtractionRequest, build_request_body
from receiptflow.runtime.logging import get_logger
from receiptflow.runtime.settings import ExtractionSettings

logger = get_logger(__name__)

CREDENTIAL_PREFIX_LENGTH = 4


class ExtractionProvider(Protocol):
    """A service that turns an extraction request into a raw reply envelope."""

    def submit(self, request: ExtractionRequest) -> dict[str, Any]: ...


def redact_credential(credential: str) -> str:
    """Return a short, non-identifying prefix of a credential for diagnostics."""
    if len(credential) <= CREDENTIAL_PREFIX_LENGTH * 2:
        return "***"
    return f"{credential[:CREDENTIAL_PREFIX_LENGTH]}..."


def _error_message(response: httpx.Response) -> str:
    """Pull ``error.message`` from the service's error envelope if it has one."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            return error["message"]
    return f"API Error (Status: {response.status_code})"


class OpenAIChatProvider:
    """Structured receipt extraction via an OpenAI-compatible chat completions API."""

    def __init__(
        self,
        credential: str,
        settings: ExtractionSettings | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        if not credential:
            raise MissingCredentialError("An API credential is required for receipt extraction")
        self._credential = credential
        self.settings = settings or ExtractionSettings()
        self._http_client = http_client

    def __repr__(self) -> str:
        return f"OpenAIChatProvider(model={self.settings.model!r}, credential={redact_credential(self._credential)!r})"

    @property
    def endpoint(self) -> str:
        return f"{self.settings.base_url.rstrip('/')}/chat/completions"

    def _post(self, body: dict[str, Any]) -> httpx.Response:
        headers = {"Authorization": f"Bearer {self._credential}"}
        timeout = self.settings.timeout_seconds
        if self._http_client is not None:
            return self._http_client.post(self.endpoint, json=body, headers=headers, timeout=timeout)
        return httpx.post(self.endpoint, json=body, headers=headers, timeout=timeout)

    def submit(self, request: ExtractionRequest) -> dict[str, Any]:
        """
        Send one extraction request and return the raw success envelope.

        Raises:
            TransportError: connection failure or timeout
            ServiceRejectedError: non-2xx status
            MalformedPayloadError: 2xx reply whose body is not a JSON object
        """
        body = build_request_body(
            request,
            model=self.settings.model,
            temperature=self.settings.temperature,
            max_tokens=self.settings.max_tokens,
            strict_schema=self.settings.strict_schema,
        )

        logger.info("Sending receipt text to %s (model %s)...", self.endpoint, self.settings.model)
        logger.debug("Using credential %s", redact_credential(self._credential))

        start_time = time.monotonic()
        try:
            response = self._post(body)
        except httpx.TimeoutException as e:
            logger.error("Extraction service timed out after %.1f seconds", self.settings.timeout_seconds)
            raise TransportError(f"Extraction service timed out: {e}") from e
        except httpx.RequestError as e:
            logger.error("Failed to connect to extraction service: %s", e)
            raise TransportError(f"Failed to connect to extraction service: {e}") from e

        elapsed_time = time.monotonic() - start_time
        logger.info("Extraction service returned %s in %.2f seconds", response.status_code, elapsed_time)

        if not response.is_success:
            message = _error_message(response)
            logger.error("Extraction service error: %s - %s", response.status_code, message)
            raise ServiceRejectedError(response.status_code, message)

        try:
            envelope = response.json()
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors.
            raise MalformedPayloadError("service reply is not valid JSON", content=response.text) from e
        if not isinstance(envelope, dict):
            raise MalformedPayloadError("service reply is not a JSON object", content=response.text)
        return envelope


def create_provider(settings: ExtractionSettings, credential: str) -> ExtractionProvider:
    """Return the configured extraction provider."""
    if settings.provider == "openai":
        return OpenAIChatProvider(credential, settings)
    raise ValueError(f"Unknown extraction provider: {settings.provider}")
