"""
Error taxonomy for the command harness.

Every error raised by the harness derives from GushError so the CLI can
convert them in one place. Lookup errors also derive from the builtin
exception a Python caller would expect (KeyError, ValueError).
"""

from __future__ import annotations


class GushError(Exception):
    """Base class for all gush errors."""


class CommandExecutionError(GushError):
    """A process exited non-zero and the invocation was not failure-tolerant."""

    def __init__(self, stderr: str, exit_status: int, argv: tuple[str, ...] = ()):
        super().__init__(stderr)
        self.stderr = stderr
        self.exit_status = exit_status
        self.argv = argv

    def __str__(self) -> str:
        message = self.stderr.strip()
        if message:
            return message
        return f"Command '{' '.join(self.argv)}' failed with exit status {self.exit_status}"


class CommandTimeoutError(GushError):
    """A process did not finish within its timeout."""

    def __init__(
        self,
        argv: tuple[str, ...],
        timeout: float,
        stdout: str = "",
        stderr: str = "",
    ):
        super().__init__(f"Command '{' '.join(argv)}' timed out after {timeout:g} seconds")
        self.argv = argv
        self.timeout = timeout
        self.stdout = stdout
        self.stderr = stderr


class ToolNotInstalledError(GushError):
    """A required external tool is missing."""

    def __init__(self, tool: str):
        super().__init__(f"Please install {tool}")
        self.tool = tool


class UnknownEnumError(GushError, KeyError):
    """An enum name was used without being defined."""

    def __init__(self, name: str):
        super().__init__(f"Unknown enum {name}")
        self.name = name

    def __str__(self) -> str:
        return f"Unknown enum {self.name}"


class InvalidEnumValueError(GushError, ValueError):
    """A value is not a member of its enum definition."""

    def __init__(self, name: str, value: str, allowed: tuple[str, ...]):
        super().__init__(f'Value must be one of {", ".join(allowed)} got "{value}"')
        self.name = name
        self.value = value
        self.allowed = allowed


class UnknownTemplateError(GushError, KeyError):
    """A template id is not in the catalog."""

    def __init__(self, template_id: str):
        super().__init__(f"Unknown template {template_id}")
        self.template_id = template_id

    def __str__(self) -> str:
        return f"Unknown template {self.template_id}"


class ConfigError(GushError):
    """The configuration file could not be read."""


class GitHubApiError(GushError):
    """A GitHub API request failed."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status
