"""Centralized path management for receiptflow."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _get_project_root() -> Path:
    """Project root: RECEIPTFLOW_HOME if set, else the current working directory."""
    home = os.environ.get("RECEIPTFLOW_HOME")
    return Path(home) if home else Path.cwd()


@dataclass
class ProjectPaths:
    """Container for project-related paths, all relative to the project root."""

    root: Path = field(default_factory=_get_project_root)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def extraction_config(self) -> Path:
        """Extraction service settings TOML file."""
        return self.config / "extraction.toml"

    @property
    def exports(self) -> Path:
        """Directory for generated CSV exports."""
        return self.root / "exports"

    def ensure_export_directory(self) -> None:
        self.exports.mkdir(parents=True, exist_ok=True)


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths() -> None:
    """Drop the cached ProjectPaths so the next get_paths() re-reads the environment."""
    global _paths
    _paths = None
