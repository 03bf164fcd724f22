"""Defaults and well-known paths for swiftstyle."""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = ".swiftstyle.toml"
SUPPORTED_EXTENSIONS = {".swift"}

DEFAULT_MAX_FIX_ITERATIONS = 10
DEFAULT_LINE_LENGTH = 120
DEFAULT_INDENT_WIDTH = 4
# 0 means "use available parallelism"
DEFAULT_JOBS = int(os.environ.get("SWIFTSTYLE_JOBS", "0") or 0)

SUPPRESSION_PREFIX = "swiftstyle:"


def available_parallelism() -> int:
    return os.cpu_count() or 1


def default_config_path(cwd: Path | None = None) -> Path | None:
    """Return ``.swiftstyle.toml`` in *cwd* if it exists."""
    candidate = (cwd or Path.cwd()) / CONFIG_FILENAME
    return candidate if candidate.is_file() else None
