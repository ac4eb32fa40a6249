"""
Application: the objects every command shares.

Built once per CLI invocation and passed to each command by reference.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from rich.console import Console

from .config import Config
from .github import DEFAULT_BASE_URL, GitHubClient, GitHubConfig
from .harness.process import ProcessRunner
from .harness.templates import TemplateCatalog
from .secrets import resolve_secret

logger = logging.getLogger(__name__)


def build_github_client(config: Config) -> GitHubClient:
    """Build an authenticated client from the github.* config keys."""
    token = resolve_secret(config.get("github.token"))
    if not token:
        logger.debug("No github.token configured, using anonymous API access")
    return GitHubClient(
        GitHubConfig(
            token=token,
            base_url=str(config.get("github.base_url", DEFAULT_BASE_URL)),
            timeout_s=float(config.get("github.timeout", 10.0)),
        )
    )


@dataclass
class Application:
    config: Config
    templates: TemplateCatalog
    runner: ProcessRunner = field(default_factory=ProcessRunner)
    console: Console = field(default_factory=Console)
    err_console: Console = field(default_factory=lambda: Console(stderr=True))
    cwd: Path | None = None  # None: the process's current directory at call time
    client_factory: Callable[[Config], GitHubClient] = build_github_client
    _client: GitHubClient | None = field(default=None, init=False, repr=False)

    def get_config(self) -> Config:
        return self.config

    def get_github_client(self) -> GitHubClient:
        if self._client is None:
            self._client = self.client_factory(self.config)
        return self._client

    def working_directory(self) -> Path:
        return self.cwd or Path.cwd()

    @classmethod
    def from_config_file(cls, path: Path | None = None) -> Application:
        return cls(config=Config.load(path), templates=TemplateCatalog.bundled())
