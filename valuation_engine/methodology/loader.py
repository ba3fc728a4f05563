"""Load and validate engine configs from JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

from valuation_engine.config.settings import Settings
from valuation_engine.methodology.schema import EngineConfig

logger = logging.getLogger(__name__)

# Default directory for engine config files
_CONFIG_DIR = Path(__file__).parent / "configs"


def load_config(file_path: Path | None = None) -> EngineConfig:
    """Load and validate an engine config from a JSON file.

    If no path is provided, loads the default V1 config.
    """
    if file_path is None:
        file_path = _CONFIG_DIR / "engine_v1.json"

    if not file_path.exists():
        raise FileNotFoundError(f"Engine config not found: {file_path}")

    with open(file_path, "r") as f:
        raw = json.load(f)

    return EngineConfig.model_validate(raw)


def get_default_config(settings: Optional[Settings] = None) -> EngineConfig:
    """Load the configured engine config and apply environment overrides."""
    settings = settings or Settings()
    path = Path(settings.methodology_path) if settings.methodology_path else None
    config = load_config(path)

    overrides: dict[str, float] = {}
    if settings.default_alpha is not None:
        overrides["alpha"] = settings.default_alpha
    if settings.unanswered_category_score is not None:
        overrides["unanswered_category_score"] = settings.unanswered_category_score
    if not overrides:
        return config

    logger.info("Applying settings overrides to engine config: %s", overrides)
    # Out-of-range overrides raise ValidationError here
    return EngineConfig.model_validate({**config.model_dump(), **overrides})
