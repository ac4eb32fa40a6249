"""
Base class for gush commands.

BaseCommand composes the harness for concrete commands:
- GitHub client and configuration accessors
- git introspection (vendor, repository, branch)
- process execution with output echoed as it arrives
- enum validation for options
- template rendering and slug generation

Nothing is swallowed here: commands decide whether to turn an error into
a message or let it end the command.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Iterable, Mapping

import click

from ..application import Application
from ..config import Config
from ..github import GitHubClient
from ..harness.enums import EnumValidator
from ..harness.errors import ToolNotInstalledError
from ..harness.git import GitFacade
from ..harness.process import DEFAULT_TIMEOUT, ProcessInvocation, ProcessOutcome, Stream
from ..harness.templates import TemplateRenderer
from ..slug import SlugGenerator


def echo_chunk(stream: Stream, chunk: str) -> None:
    """Echo a process chunk to our own stdout or stderr, tagged."""
    if stream is Stream.ERR:
        click.echo(f"ERR > {chunk}", nl=False, err=True)
    else:
        click.echo(f"OUT > {chunk}", nl=False)


class BaseCommand(ABC):
    """Composition root every concrete command builds on."""

    SUCCESS: ClassVar[int] = 1
    FAILURE: ClassVar[int] = 0

    name: ClassVar[str]
    # Option name -> allowed values, copied into each instance's validator.
    ENUMS: ClassVar[Mapping[str, tuple[str, ...]]] = {}

    def __init__(self, app: Application):
        self.app = app
        self.enum = EnumValidator.from_definitions(self.ENUMS)
        self.renderer = TemplateRenderer(app.templates)
        self.console = app.console

    @abstractmethod
    def execute(self, **options: Any) -> int:
        """Run the command; return SUCCESS or FAILURE."""
        ...

    # -------------------------------------------------------------------------
    # Collaborators
    # -------------------------------------------------------------------------

    def get_github_client(self) -> GitHubClient:
        return self.app.get_github_client()

    def get_parameter(self, key: str) -> Any:
        config: Config = self.app.get_config()
        return config.get(key)

    def get_slugifier(self) -> SlugGenerator:
        return SlugGenerator()

    def render(self, template_id: str, values: Mapping[str, Any]) -> str:
        return self.renderer.render(template_id, values)

    # -------------------------------------------------------------------------
    # Git introspection
    # -------------------------------------------------------------------------

    def git(self) -> GitFacade:
        return GitFacade(self.app.runner, self.app.working_directory())

    def get_repo_name(self) -> str:
        return self.git().repository_name()

    def get_vendor_name(self) -> str:
        return self.git().vendor_name()

    def get_branch_name(self) -> str:
        return self.git().current_branch()

    def resolve_repository(self, org: str | None, repo: str | None) -> tuple[str, str]:
        """Explicit --org/--repo values, falling back to the origin remote."""
        return (org or self.get_vendor_name(), repo or self.get_repo_name())

    # -------------------------------------------------------------------------
    # Process execution
    # -------------------------------------------------------------------------

    def run_item(self, command: Iterable[str], allow_failures: bool = False) -> ProcessOutcome:
        """Run one command line, echoing its output as it arrives."""
        invocation = ProcessInvocation(
            argv=tuple(command),
            cwd=self.app.working_directory(),
            timeout=DEFAULT_TIMEOUT,
            allow_failures=allow_failures,
        )
        return self.app.runner.run(invocation, echo_chunk)

    def run_commands(self, commands: Iterable[Mapping[str, Any]]) -> list[ProcessOutcome]:
        """
        Run command lines in order.

        Each entry has a `line` (split on whitespace) and an optional
        `allow_failures` flag. The first raised error stops the sequence.
        """
        outcomes = []
        for command in commands:
            # Runs of whitespace separate arguments; no empty tokens.
            argv = str(command["line"]).split()
            outcomes.append(self.run_item(argv, bool(command.get("allow_failures", False))))
        return outcomes

    def ensure_installed(self, executable: str, *args: str) -> None:
        invocation = ProcessInvocation(
            argv=(executable, *args),
            cwd=self.app.working_directory(),
            timeout=DEFAULT_TIMEOUT,
            allow_failures=True,
        )
        if not self.app.runner.run_silent(invocation).success:
            raise ToolNotInstalledError(executable)

    # -------------------------------------------------------------------------
    # Enums
    # -------------------------------------------------------------------------

    def define_enum(self, name: str, allowed_values: Iterable[str]) -> None:
        self.enum.define(name, allowed_values)

    def describe_enum(self, name: str) -> str:
        return self.enum.describe(name)

    def validate_enum(self, name: str, value: str) -> None:
        self.enum.validate(name, value)
