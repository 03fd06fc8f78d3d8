"""Loading settings from YAML files."""

from __future__ import annotations

from pathlib import Path

import yaml

from trackplan.settings.exceptions import SettingsError
from trackplan.settings.models import Settings


def load_settings(path: str | Path) -> Settings:
    """Load settings from a YAML file.

    Args:
        path: Path to the YAML settings file.

    Returns:
        Parsed settings.

    Raises:
        SettingsError: If the file is missing, is not valid YAML, or contains
            invalid contributor entries.
    """
    path = Path(path)
    if not path.exists():
        raise SettingsError(f"Settings file not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise SettingsError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()
    return Settings.from_dict(data)
