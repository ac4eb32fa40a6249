"""Branch commands."""

from __future__ import annotations

from typing import Any

from .base import BaseCommand


class BranchPushCommand(BaseCommand):
    """Push a local branch and set its upstream."""

    name = "branch:push"

    def execute(self, remote: str | None = None, branch: str | None = None, **options: Any) -> int:
        remote = remote or self.get_parameter("remote") or "origin"
        branch = branch or self.get_branch_name()
        if not branch:
            self.app.err_console.print("Could not determine the current branch", style="bold red")
            return self.FAILURE

        self.run_item(["git", "push", "-u", remote, branch])

        self.console.print(
            self.render("branch_pushed", {"branch": branch, "remote": remote}),
            markup=False,
            highlight=False,
        )
        return self.SUCCESS
