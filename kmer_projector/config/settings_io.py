"""
Annotation settings I/O helpers.
Settings are JSON on disk; anything not in the file keeps its default.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from kmer_projector.core.exceptions import ConfigurationError
from kmer_projector.schemas.config import AnnotationConfig, build_config

USER_SETTINGS_PATH = Path.home() / ".kmer_projector" / "settings.json"


def load_config(path: Optional[Path] = None, **overrides: Any) -> AnnotationConfig:
    """
    Load settings from `path` (if given) and apply non-None `overrides` on top.

    Raises ConfigurationError for a missing or malformed file, unknown keys,
    or out-of-range values.
    """
    data: Dict[str, Any] = {}
    if path is not None:
        if not path.exists():
            raise ConfigurationError(f"Configuration file not found: {path}")
        try:
            data = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise ConfigurationError(f"Invalid configuration file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must hold a JSON object")
    data.update({key: value for key, value in overrides.items() if value is not None})
    return build_config(**data)


def save_config(config: AnnotationConfig, path: Path = USER_SETTINGS_PATH) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(config.model_dump_json(indent=2))
