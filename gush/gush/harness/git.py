"""
Repository introspection through git.

Vendor and repository names come from the fetch URL of the `origin`
remote; the branch comes from `git branch`. Remote URLs are either
SSH-shaped (git@github.com:acme/widget.git) or HTTPS-shaped
(https://github.com/acme/widget.git), so each query tries the SSH field
rule first and falls back to the HTTPS rule when it yields nothing.

Fields are picked the way `grep | cut -d X -f N` would: a line without the
delimiter passes through whole, a missing field is empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .process import ProcessInvocation, ProcessRunner

logger = logging.getLogger(__name__)

REMOTE_SHOW_ARGV = ("git", "remote", "show", "-n", "origin")
BRANCH_ARGV = ("git", "branch")
INTROSPECTION_TIMEOUT = 60.0


@dataclass(frozen=True)
class RepositoryCoordinates:
    vendor: str
    repository: str
    branch: str


def grep(text: str, needle: str) -> str:
    """Lines of text containing needle."""
    return "\n".join(line for line in text.splitlines() if needle in line)


def cut(text: str, delimiter: str, field: int) -> str:
    """Select the 1-based field of every line, split on delimiter."""
    selected = []
    for line in text.splitlines():
        if delimiter not in line:
            selected.append(line)
            continue
        parts = line.split(delimiter)
        selected.append(parts[field - 1] if field <= len(parts) else "")
    return "\n".join(selected)


def _first_nonempty(text: str, rules: list[Callable[[str], str]]) -> str:
    result = ""
    for rule in rules:
        result = rule(text).strip()
        if result:
            break
    return result


def parse_repository_name(remote_output: str) -> str:
    fetch = grep(remote_output, "Fetch")
    return _first_nonempty(
        fetch,
        [
            lambda t: cut(cut(t, "/", 2), ".", 1),  # git@host:owner/repo.git
            lambda t: cut(cut(t, "/", 5), ".", 1),  # https://host/owner/repo.git
        ],
    )


def parse_vendor_name(remote_output: str) -> str:
    fetch = grep(remote_output, "Fetch")
    return _first_nonempty(
        fetch,
        [
            lambda t: cut(cut(t, ":", 3), "/", 1),
            lambda t: cut(cut(t, ":", 3), "/", 4),
        ],
    )


def parse_branch_name(branch_output: str) -> str:
    return cut(grep(branch_output, "*"), " ", 2).strip()


class GitFacade:
    """Read-only git queries, recomputed on every call."""

    def __init__(self, runner: ProcessRunner, cwd: Path | None = None):
        self.runner = runner
        self.cwd = cwd

    def _output(self, argv: tuple[str, ...]) -> str:
        invocation = ProcessInvocation(
            argv=argv,
            cwd=self.cwd or Path.cwd(),
            timeout=INTROSPECTION_TIMEOUT,
            allow_failures=True,
        )
        outcome = self.runner.run_silent(invocation)
        if not outcome.success:
            logger.debug("%s failed: %s", " ".join(argv), outcome.stderr.strip())
        return outcome.stdout

    def repository_name(self) -> str:
        return parse_repository_name(self._output(REMOTE_SHOW_ARGV))

    def vendor_name(self) -> str:
        return parse_vendor_name(self._output(REMOTE_SHOW_ARGV))

    def current_branch(self) -> str:
        return parse_branch_name(self._output(BRANCH_ARGV))

    def coordinates(self) -> RepositoryCoordinates:
        return RepositoryCoordinates(
            vendor=self.vendor_name(),
            repository=self.repository_name(),
            branch=self.current_branch(),
        )
