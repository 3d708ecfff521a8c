"""
Phasing configuration I/O helpers.
Configuration files are JSON documents holding PhaseConfig fields.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from orfphase.schemas.phase import PhaseConfig


def load_phase_config(path: Optional[Path], overrides: Optional[Dict[str, Any]] = None) -> PhaseConfig:
    """
    Load a PhaseConfig from JSON, then apply non-None overrides.

    Missing path (None) gives the defaults. Invalid content raises pydantic's
    ValidationError (or json.JSONDecodeError).
    """
    data: Dict[str, Any] = {}
    if path is not None:
        data = json.loads(Path(path).read_text())
    if overrides:
        data.update({key: value for key, value in overrides.items() if value is not None})
    return PhaseConfig(**data)


def save_phase_config(config: PhaseConfig, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.model_dump_json(indent=2))
