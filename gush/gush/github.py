"""GitHub REST client (small, dependency-free).

Only what the commands need: authenticated JSON reads against
https://api.github.com (or an Enterprise base URL).
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlencode
from urllib.request import Request, urlopen

from .harness.errors import GitHubApiError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"


@dataclass(frozen=True)
class GitHubConfig:
    token: str | None = None
    base_url: str = DEFAULT_BASE_URL
    timeout_s: float = 10.0


class GitHubClient:
    """Minimal authenticated GitHub API client."""

    def __init__(self, cfg: GitHubConfig) -> None:
        self._cfg = cfg
        self._base = cfg.base_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "gush",
        }
        if self._cfg.token:
            headers["Authorization"] = f"Bearer {self._cfg.token}"
        return headers

    def _url(self, path: str, params: dict[str, Any] | None = None) -> str:
        url = f"{self._base}/{path.lstrip('/')}"
        if params:
            query = {k: v for k, v in params.items() if v is not None}
            if query:
                url = f"{url}?{urlencode(query)}"
        return url

    def request(self, method: str, path: str, params: dict[str, Any] | None = None) -> Any:
        """Send a request and return the decoded JSON body (None if empty)."""
        url = self._url(path, params)
        logger.debug("%s %s", method, url)
        req = Request(url, method=method, headers=self._headers())
        try:
            with urlopen(req, timeout=self._cfg.timeout_s) as resp:
                raw = resp.read().decode("utf-8")
        except HTTPError as e:
            detail = ""
            try:
                detail = json.loads(e.read().decode("utf-8")).get("message", "")
            except (ValueError, AttributeError, OSError):
                pass
            message = f"GitHub API {method} {path} failed with HTTP {e.code}"
            if detail:
                message = f"{message}: {detail}"
            raise GitHubApiError(message, status=e.code) from e
        except URLError as e:
            raise GitHubApiError(f"GitHub API {method} {path} unreachable: {e.reason}") from e

        if not raw:
            return None
        try:
            return json.loads(raw)
        except ValueError as e:
            raise GitHubApiError(f"GitHub API {method} {path} returned invalid JSON") from e

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        return self.request("GET", path, params=params)
