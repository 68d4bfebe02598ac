"""FastAPI server exposing receipt extraction and CSV export over HTTP."""

from __future__ import annotations

import os
from typing import Annotated, Any

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

from receiptflow.application.receipts.extract import ReceiptExtractRequest, run_receipt_extract
from receiptflow.domain.errors import MalformedPayloadError, MissingCredentialError
from receiptflow.receipt.csv_export import export_receipt_csv, export_receipts_csv, generate_export_filename
from receiptflow.receipt.decoder import decode_receipt_payload
from receiptflow.runtime.extraction_client import ExtractionProvider, create_provider
from receiptflow.runtime.logging import get_logger
from receiptflow.runtime.settings import ExtractionSettings, load_settings

logger = get_logger(__name__)

CREDENTIAL_ENV_VAR = "OPENAI_API_KEY"


class ExtractBody(BaseModel):
    text: str


class ExportBody(BaseModel):
    receipts: list[dict[str, Any]]


def get_settings() -> ExtractionSettings:
    """Load extraction settings for the current request."""
    try:
        return load_settings()
    except ValueError as e:
        logger.error("Invalid extraction settings: %s", e)
        raise HTTPException(status_code=500, detail=f"Invalid extraction settings: {e}") from e


def get_provider(settings: Annotated[ExtractionSettings, Depends(get_settings)]) -> ExtractionProvider:
    """Build the extraction provider from settings and the process credential."""
    credential = os.environ.get(CREDENTIAL_ENV_VAR, "")
    try:
        return create_provider(settings, credential)
    except MissingCredentialError as e:
        logger.error("%s is not set; extraction is unavailable", CREDENTIAL_ENV_VAR)
        raise HTTPException(status_code=503, detail=str(e)) from e


app = FastAPI(title="Receipt Extraction")


@app.post("/extract")
def extract_receipt(
    body: ExtractBody,
    provider: Annotated[ExtractionProvider, Depends(get_provider)],
    settings: Annotated[ExtractionSettings, Depends(get_settings)],
) -> JSONResponse:
    """Extract a structured receipt from OCR text and return it with advisory warnings."""
    result = run_receipt_extract(
        ReceiptExtractRequest(raw_text=body.text, provider=provider, tolerances=settings.tolerances)
    )

    if result.status != "extracted":
        status_code = 422 if result.status == "malformed_payload" else 502
        payload: dict[str, Any] = {"status": "error", "kind": result.status, "message": str(result.error)}
        status = getattr(result.error, "status_code", None)
        if status is not None:
            payload["serviceStatus"] = status
        return JSONResponse(payload, status_code=status_code)

    receipt = result.receipt
    validation = result.validation
    if receipt is None or validation is None:
        logger.error("Extraction reported success without a receipt")
        raise HTTPException(status_code=500, detail="Extraction failed: missing receipt output")

    return JSONResponse(
        {
            "status": "success",
            "receipt": receipt.to_wire(),
            "validation": validation.to_wire(),
            "csv": export_receipt_csv(receipt),
        }
    )


@app.post("/export")
def export_receipts(body: ExportBody) -> Response:
    """Convert wire-shaped receipts to a CSV download."""
    try:
        receipts = [decode_receipt_payload(raw) for raw in body.receipts]
    except MalformedPayloadError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    return Response(
        content=export_receipts_csv(receipts),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{generate_export_filename()}"'},
    )


@app.get("/health")
def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}
