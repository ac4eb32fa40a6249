"""
Command harness: the shared layer every gush command is built on.

- process: timeout-bounded external commands with streamed output
- enums: closed value sets for command options
- templates: named message bodies with {{ name }} placeholders
- git: repository, vendor and branch introspection
"""

from __future__ import annotations

from .enums import EnumValidator
from .errors import (
    CommandExecutionError,
    CommandTimeoutError,
    ConfigError,
    GitHubApiError,
    GushError,
    InvalidEnumValueError,
    ToolNotInstalledError,
    UnknownEnumError,
    UnknownTemplateError,
)
from .git import GitFacade, RepositoryCoordinates
from .process import (
    DEFAULT_TIMEOUT,
    ProcessInvocation,
    ProcessOutcome,
    ProcessRunner,
    Stream,
)
from .templates import TemplateCatalog, TemplateRenderer

__all__ = [
    # Errors
    "CommandExecutionError",
    "CommandTimeoutError",
    "ConfigError",
    "GitHubApiError",
    "GushError",
    "InvalidEnumValueError",
    "ToolNotInstalledError",
    "UnknownEnumError",
    "UnknownTemplateError",
    # Process
    "DEFAULT_TIMEOUT",
    "ProcessInvocation",
    "ProcessOutcome",
    "ProcessRunner",
    "Stream",
    # Enums and templates
    "EnumValidator",
    "TemplateCatalog",
    "TemplateRenderer",
    # Git
    "GitFacade",
    "RepositoryCoordinates",
]
