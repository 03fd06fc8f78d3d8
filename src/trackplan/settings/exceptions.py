"""Custom exceptions for settings handling."""


class SettingsError(Exception):
    """Raised when settings are invalid or missing."""
