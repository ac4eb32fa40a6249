"""Pytest configuration and fixtures."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from gush.application import Application
from gush.config import Config
from gush.harness.process import (
    OutputCallback,
    ProcessInvocation,
    ProcessOutcome,
    ProcessRunner,
    Stream,
)
from gush.harness.templates import TemplateCatalog

SSH_REMOTE_OUTPUT = """\
* remote origin
  Fetch URL: git@github.com:acme/widget.git
  Push  URL: git@github.com:acme/widget.git
  HEAD branch: (not queried)
"""

HTTPS_REMOTE_OUTPUT = """\
* remote origin
  Fetch URL: https://github.com/acme/widget.git
  Push  URL: https://github.com/acme/widget.git
  HEAD branch: (not queried)
"""

BRANCH_OUTPUT = """\
  feature/old
* 60-write-a-behat-test
  main
"""


class FakeRunner(ProcessRunner):
    """Runner returning canned outcomes keyed by argv; records invocations."""

    def __init__(self, outcomes: dict[tuple[str, ...], ProcessOutcome] | None = None):
        self.outcomes = dict(outcomes or {})
        self.invocations: list[ProcessInvocation] = []

    def run(self, invocation: ProcessInvocation, on_output: OutputCallback | None = None) -> ProcessOutcome:
        self.invocations.append(invocation)
        outcome = self.outcomes.get(invocation.argv, ProcessOutcome(stdout="", stderr="", exit_status=0))
        if on_output is not None:
            if outcome.stdout:
                on_output(Stream.OUT, outcome.stdout)
            if outcome.stderr:
                on_output(Stream.ERR, outcome.stderr)
        return self._classify(invocation, outcome)

    @property
    def argvs(self) -> list[tuple[str, ...]]:
        return [i.argv for i in self.invocations]


class FakeGitHubClient:
    """GitHub client double serving canned JSON by path."""

    def __init__(self, responses: dict[str, Any] | None = None):
        self.responses = dict(responses or {})
        self.requests: list[tuple[str, dict[str, Any] | None]] = []

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        self.requests.append((path, params))
        return self.responses[path]


def git_outcomes(remote_output: str = SSH_REMOTE_OUTPUT, branch_output: str = BRANCH_OUTPUT):
    return {
        ("git", "remote", "show", "-n", "origin"): ProcessOutcome(remote_output, "", 0),
        ("git", "branch"): ProcessOutcome(branch_output, "", 0),
    }


def console_text(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner(git_outcomes())


@pytest.fixture
def github() -> FakeGitHubClient:
    return FakeGitHubClient()


@pytest.fixture
def app(tmp_path: Path, runner: FakeRunner, github: FakeGitHubClient) -> Application:
    """Application wired to fakes, writing to in-memory consoles."""
    return Application(
        config=Config({"remote": "origin", "base": "main"}),
        templates=TemplateCatalog.bundled(),
        runner=runner,
        console=Console(file=io.StringIO(), width=200, color_system=None),
        err_console=Console(file=io.StringIO(), width=200, color_system=None),
        cwd=tmp_path,
        client_factory=lambda config: github,  # type: ignore[arg-type,return-value]
    )
