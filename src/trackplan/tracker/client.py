"""YouTrackClient - Connects to YouTrack via OAuth and loads metadata."""

from __future__ import annotations

import logging
import webbrowser
from collections.abc import Callable
from typing import Any
from urllib.parse import urlencode, urljoin

import httpx

from trackplan.logging import redact_tokens
from trackplan.tracker.exceptions import (
    TrackerAuthError,
    TrackerError,
    TrackerNotConnectedError,
)
from trackplan.tracker.models import TrackerMetadata

logger = logging.getLogger(__name__)

WORK_TIME_SETTINGS_PATH = "api/admin/timeTrackingSettings/workTimeSettings"
USERS_PATH = "api/users"


class YouTrackClient:
    """Client for the YouTrack REST API.

    Authentication uses the OAuth 2.0 implicit grant of the YouTrack Hub
    service. connect() sends the user to the authorization page; the token
    obtained from the redirect is passed back in with set_token().
    """

    def __init__(
        self,
        redirect_uri: str,
        token: str | None = None,
        navigate: Callable[[str], Any] = webbrowser.open,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the YouTrack client.

        Args:
            redirect_uri: URI the Hub redirects to after authorization.
            token: OAuth access token, if already known.
            navigate: Opens the authorization page (defaults to the web browser).
            timeout: HTTP timeout in seconds.
        """
        self.redirect_uri = redirect_uri
        self.token = token
        self.navigate = navigate
        self.timeout = timeout
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client for the REST API."""
        if self._client is None:
            if self.token is None:
                raise TrackerNotConnectedError("No YouTrack access token available")
            self._client = httpx.AsyncClient(
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/json",
                },
                timeout=self.timeout,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def set_token(self, token: str) -> None:
        """Store a new access token, replacing the HTTP client."""
        await self.aclose()
        self.token = token
        logger.info("Stored new YouTrack access token")

    def oauth_url(self, base_url: str, service_id: str) -> str:
        """Build the Hub authorization URL for the implicit grant.

        Args:
            base_url: Base URL of the YouTrack instance, ending in a slash.
            service_id: ID of the YouTrack service registered in the Hub.
        """
        query = urlencode(
            {
                "response_type": "token",
                "client_id": service_id,
                "scope": service_id,
                "redirect_uri": self.redirect_uri,
                "request_credentials": "default",
            }
        )
        return f"{urljoin(base_url, 'hub/api/rest/oauth2/auth')}?{query}"

    async def connect(self, base_url: str, service_id: str) -> None:
        """Send the user to the YouTrack authorization page."""
        url = self.oauth_url(base_url, service_id)
        logger.info("Opening YouTrack authorization page for %s", base_url)
        self.navigate(url)

    async def _get(self, base_url: str, path: str, fields: str) -> Any:
        """Execute a GET request against the REST API.

        Raises:
            TrackerAuthError: If the token is rejected.
            TrackerError: If the request fails.
        """
        url = urljoin(base_url, path)
        response = await self.client.get(url, params={"fields": fields})

        if response.status_code in (401, 403):
            raise TrackerAuthError(f"YouTrack rejected the access token: {response.status_code}")
        if response.status_code != 200:
            raise TrackerError(
                f"YouTrack request failed: {response.status_code} - "
                f"{redact_tokens(response.text)}"
            )
        return response.json()

    async def fetch_metadata(self, base_url: str) -> TrackerMetadata:
        """Load work-week settings and users of a YouTrack instance.

        Args:
            base_url: Base URL of the YouTrack instance, ending in a slash.

        Returns:
            The instance metadata.

        Raises:
            TrackerNotConnectedError: If no access token is available.
            TrackerAuthError: If the token is rejected.
            TrackerError: If a request fails.
        """
        logger.info("Loading YouTrack metadata from %s", base_url)
        work_time = await self._get(base_url, WORK_TIME_SETTINGS_PATH, "minutesADay,workDays")
        users = await self._get(base_url, USERS_PATH, "id,fullName")

        minutes_per_work_week = int(work_time["minutesADay"]) * len(work_time["workDays"])
        user_map = {str(user["id"]): user.get("fullName") or "" for user in users}

        logger.info(
            "Loaded YouTrack metadata: %d minutes per work week, %d user(s)",
            minutes_per_work_week,
            len(user_map),
        )
        return TrackerMetadata(
            base_url=base_url,
            minutes_per_work_week=minutes_per_work_week,
            users=user_map,
        )
