"""Runtime loader for extraction service settings.

Settings come from ``config/extraction.toml`` when present, then from
environment overrides:

    RECEIPTFLOW_PROVIDER, RECEIPTFLOW_BASE_URL, RECEIPTFLOW_MODEL, RECEIPTFLOW_TIMEOUT

Example TOML:

    [extraction]
    model = "gpt-4o-mini"
    max_tokens = 2000

    [tolerances]
    subtotal = "0.10"
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from receiptflow.receipt.validator import DEFAULT_TOLERANCES, Tolerances
from receiptflow.runtime.paths import get_paths

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "gpt-4o-mini"
# Low temperature biases the model toward deterministic output.
DEFAULT_TEMPERATURE = 0.1
DEFAULT_MAX_TOKENS = 2000
DEFAULT_TIMEOUT_SECONDS = 60.0

_EXTRACTION_KEYS = {"provider", "base_url", "model", "temperature", "max_tokens", "strict_schema", "timeout_seconds"}
_TOLERANCE_KEYS = {"item", "subtotal", "total"}


@dataclass(frozen=True)
class ExtractionSettings:
    """Recognized options for the extraction client."""

    provider: str = "openai"
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    max_tokens: int = DEFAULT_MAX_TOKENS
    strict_schema: bool = True
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    tolerances: Tolerances = DEFAULT_TOLERANCES

    def __post_init__(self) -> None:
        if not self.strict_schema:
            raise ValueError("strict_schema cannot be disabled: unconstrained output cannot be decoded")
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")


def _parse_tolerances(table: dict[str, Any]) -> Tolerances:
    unknown = sorted(set(table) - _TOLERANCE_KEYS)
    if unknown:
        raise ValueError(f"Unknown tolerance keys: {', '.join(unknown)}")

    values: dict[str, Decimal] = {}
    for key, raw in table.items():
        try:
            value = Decimal(str(raw))
        except InvalidOperation as e:
            raise ValueError(f"Tolerance {key!r} is not a number: {raw!r}") from e
        if value < 0:
            raise ValueError(f"Tolerance {key!r} must not be negative: {raw!r}")
        values[key] = value
    return replace(DEFAULT_TOLERANCES, **values)


def _env_overrides() -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if provider := os.environ.get("RECEIPTFLOW_PROVIDER"):
        overrides["provider"] = provider
    if base_url := os.environ.get("RECEIPTFLOW_BASE_URL"):
        overrides["base_url"] = base_url
    if model := os.environ.get("RECEIPTFLOW_MODEL"):
        overrides["model"] = model
    if timeout := os.environ.get("RECEIPTFLOW_TIMEOUT"):
        try:
            overrides["timeout_seconds"] = float(timeout)
        except ValueError as e:
            raise ValueError(f"RECEIPTFLOW_TIMEOUT must be a number, got {timeout!r}") from e
    return overrides


def load_settings(config_path: str | Path | None = None) -> ExtractionSettings:
    """
    Load extraction settings from TOML and the environment.

    Args:
        config_path: Optional TOML path override. If None, uses config/extraction.toml.

    Returns:
        ExtractionSettings with file values, then environment overrides, applied.
    """
    path = Path(config_path) if config_path is not None else get_paths().extraction_config

    options: dict[str, Any] = {}
    if path.exists():
        with open(path, "rb") as f:
            config = tomllib.load(f)

        extraction = config.get("extraction", {})
        unknown = sorted(set(extraction) - _EXTRACTION_KEYS)
        if unknown:
            raise ValueError(f"Unknown extraction settings in {path}: {', '.join(unknown)}")
        options.update(extraction)

        if "tolerances" in config:
            options["tolerances"] = _parse_tolerances(config["tolerances"])

    options.update(_env_overrides())
    return ExtractionSettings(**options)
