"""Repo info command - show what gush infers from the local clone."""

from __future__ import annotations

from typing import Any

from .base import BaseCommand


class RepoInfoCommand(BaseCommand):
    name = "repo:info"

    def execute(self, **options: Any) -> int:
        coords = self.git().coordinates()
        if not coords.vendor or not coords.repository:
            self.app.err_console.print(
                "Could not determine the repository from the 'origin' remote",
                style="bold red",
            )
            return self.FAILURE

        self.console.print(
            self.render(
                "repo_info",
                {
                    "vendor": coords.vendor,
                    "repository": coords.repository,
                    "branch": coords.branch or "(none)",
                },
            ),
            markup=False,
            highlight=False,
        )
        return self.SUCCESS
