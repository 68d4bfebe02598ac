"""Receipt extraction workflow orchestration."""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Literal

from receiptflow.domain.errors import (
    ExtractionError,
    MalformedPayloadError,
    ServiceRejectedError,
    TransportError,
)
from receiptflow.receipt.composer import compose_request
from receiptflow.receipt.decoder import decode_envelope
from receiptflow.receipt.validator import DEFAULT_TOLERANCES, Tolerances, validate_receipt
from receiptflow.runtime import get_logger

if TYPE_CHECKING:
    from receiptflow.domain.receipt import Receipt, ValidationOutcome
    from receiptflow.runtime.extraction_client import ExtractionProvider

logger = get_logger(__name__)

ExtractStatus = Literal[
    "extracted",
    "transport_failed",
    "service_rejected",
    "malformed_payload",
]


@dataclass(frozen=True)
class RetryPolicy:
    """Caller-configured retry for transient extraction failures.

    The default makes a single attempt. Only transport failures and
    retryable service rejections (429, 5xx) are retried; malformed
    payloads never are.
    """

    max_attempts: int = 1
    backoff_seconds: float = 0.5
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False)

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts}")

    def should_retry(self, error: ExtractionError, attempt: int) -> bool:
        if attempt >= self.max_attempts:
            return False
        if isinstance(error, TransportError):
            return True
        return isinstance(error, ServiceRejectedError) and error.is_retryable

    def delay_for(self, attempt: int) -> float:
        return self.backoff_seconds * (2 ** (attempt - 1))


@dataclass(frozen=True)
class ReceiptExtractRequest:
    """Inputs for running the receipt extraction workflow."""

    raw_text: str
    provider: ExtractionProvider
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    tolerances: Tolerances = DEFAULT_TOLERANCES


@dataclass(frozen=True)
class ReceiptExtractResult:
    """Outcome from the receipt extraction workflow."""

    status: ExtractStatus
    receipt: Receipt | None = None
    validation: ValidationOutcome | None = None
    error: ExtractionError | None = None
    attempts: int = 0


def _status_for(error: ExtractionError) -> ExtractStatus:
    if isinstance(error, ServiceRejectedError):
        return "service_rejected"
    if isinstance(error, MalformedPayloadError):
        return "malformed_payload"
    return "transport_failed"


def run_receipt_extract(request: ReceiptExtractRequest) -> ReceiptExtractResult:
    """Run extraction flow: compose -> submit -> decode -> validate.

    A receipt is only returned once the whole reply decoded; validation
    warnings are attached but never fail the workflow.
    """
    extraction_request = compose_request(request.raw_text)
    policy = request.retry_policy

    attempt = 0
    while True:
        attempt += 1
        try:
            envelope = request.provider.submit(extraction_request)
            receipt = decode_envelope(envelope)
        except ExtractionError as exc:
            if policy.should_retry(exc, attempt):
                delay = policy.delay_for(attempt)
                logger.warning("Extraction attempt %d failed (%s); retrying in %.1fs", attempt, exc, delay)
                policy.sleep(delay)
                continue
            logger.error("Receipt extraction failed after %d attempt(s): %s", attempt, exc)
            return ReceiptExtractResult(status=_status_for(exc), error=exc, attempts=attempt)
        break

    validation = validate_receipt(receipt, request.tolerances)
    for warning in validation.warnings:
        logger.warning("Receipt validation: %s", warning)

    return ReceiptExtractResult(
        status="extracted",
        receipt=receipt,
        validation=validation,
        attempts=attempt,
    )
