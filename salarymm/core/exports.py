from __future__ import annotations

import os
from pathlib import Path


def _base_root() -> Path:
    env_root = os.getenv("EXPORTS_ROOT")
    if env_root:
        return Path(env_root).expanduser().resolve()
    return Path(__file__).resolve().parents[2] / "exports"


def ensure_period_dir(month: int, year: int) -> Path:
    """Ensure the report folder for a payroll period exists and return it."""

    root = _base_root() / f"{year}-{month:02d}"
    root.mkdir(parents=True, exist_ok=True)
    return root
