"""Persist generated CSV exports to disk.

Exports land in ``exports/`` under the project root unless a directory is
given. Concurrent writers must target distinct filenames.
"""

from __future__ import annotations

from pathlib import Path

from receiptflow.runtime.logging import get_logger
from receiptflow.runtime.paths import get_paths

logger = get_logger(__name__)


def _unique_path(directory: Path, filename: str) -> Path:
    filepath = directory / filename
    base_name, _, suffix = filename.rpartition(".")
    if not base_name:
        base_name, suffix = filename, "csv"

    # Handle filename collisions by appending a counter
    counter = 1
    while filepath.exists():
        filepath = directory / f"{base_name}_{counter}.{suffix}"
        counter += 1
    return filepath


def save_csv(csv_text: str, filename: str, output_dir: Path | None = None) -> Path:
    """
    Write CSV text as UTF-8.

    Args:
        csv_text: Output of export_receipts_csv()
        filename: Target file name, e.g. from generate_export_filename()
        output_dir: Directory to write into; defaults to the project exports/ directory

    Returns:
        Path to the written file
    """
    if output_dir is None:
        get_paths().ensure_export_directory()
        output_dir = get_paths().exports
    else:
        output_dir.mkdir(parents=True, exist_ok=True)

    filepath = _unique_path(output_dir, filename)
    # "x" mode fails rather than clobbering a file created since _unique_path() looked.
    with open(filepath, "x", encoding="utf-8", newline="") as f:
        f.write(csv_text)

    logger.info("Saved CSV export to %s", filepath)
    return filepath
