"""Settings - User-editable planning configuration and its snapshots."""

from trackplan.settings.exceptions import SettingsError
from trackplan.settings.loader import load_settings
from trackplan.settings.models import (
    ConfigurationSnapshot,
    ContributorEntry,
    ContributorKind,
    ExternalContributor,
    InternalContributor,
    Settings,
)

__all__ = [
    "ConfigurationSnapshot",
    "ContributorEntry",
    "ContributorKind",
    "ExternalContributor",
    "InternalContributor",
    "Settings",
    "SettingsError",
    "load_settings",
]
