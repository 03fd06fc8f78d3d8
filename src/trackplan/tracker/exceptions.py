"""Custom exceptions for the YouTrack client."""


class TrackerError(Exception):
    """Base exception for YouTrack client errors."""


class TrackerAuthError(TrackerError):
    """YouTrack rejected the access token."""


class TrackerNotConnectedError(TrackerError):
    """No access token is available yet."""
