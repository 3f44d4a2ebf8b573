"""
Live API client for the MK Central Lounge leaderboard
One call per invocation, no retries; failures are raised as typed errors
"""
import logging
from typing import Optional

import requests
from pydantic import ValidationError

from app.errors import UpstreamDecodeError, UpstreamNetworkError, UpstreamStatusError
from app.schemas import UpstreamRecord
from config.settings import settings

logger = logging.getLogger("api_client")

PLAYER_DETAILS_PATH = "/api/player/details"


class LoungeClient:
    """
    Thin wrapper around a shared requests.Session.

    Usage:
        client = LoungeClient()
        raw = client.fetch_player_details("Foo Bar", "mkworld24p")
    """

    def __init__(
        self,
        base_url: str = settings.upstream_base_url,
        timeout: float = settings.upstream_timeout_seconds,
        user_agent: str = settings.user_agent,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": user_agent})

    def fetch_player_details(self, name: str, game: str) -> UpstreamRecord:
        """
        Fetch one player's raw details.

        Args:
            name: Trimmed, validated player name
            game: Lounge game id (mkworld12p / mkworld24p)

        Returns:
            Parsed upstream record

        Raises:
            UpstreamNetworkError: Timeout, DNS or connection failure
            UpstreamStatusError: Non-success HTTP status
            UpstreamDecodeError: Body is not the expected JSON schema
        """
        logger.info(f"Fetching Lounge details for {name!r} ({game})")
        try:
            response = self._session.get(
                f"{self.base_url}{PLAYER_DETAILS_PATH}",
                params={"name": name, "game": game},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise UpstreamNetworkError(e) from e

        if not response.ok:
            raise UpstreamStatusError(response.status_code, _body_text(response))

        try:
            return UpstreamRecord.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UpstreamDecodeError(e) from e

    def close(self) -> None:
        self._session.close()


def _body_text(response: requests.Response) -> str:
    """Best-effort body text for error messages."""
    try:
        return response.text
    except (requests.RequestException, UnicodeDecodeError, LookupError):
        return "Unknown error"
