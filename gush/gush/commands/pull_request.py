"""Pull request commands."""

from __future__ import annotations

from typing import Any

from .base import BaseCommand


class PullRequestLabelListCommand(BaseCommand):
    """List the labels that can be applied to pull requests."""

    name = "pull-request:label-list"

    def execute(self, org: str | None = None, repo: str | None = None, **options: Any) -> int:
        vendor, repository = self.resolve_repository(org, repo)
        labels = self.get_github_client().get(f"/repos/{vendor}/{repository}/labels") or []

        if not labels:
            self.app.err_console.print(
                self.render("no_labels", {"vendor": vendor, "repository": repository}),
                markup=False,
            )
            return self.SUCCESS

        for label in labels:
            self.console.print(label["name"], markup=False, highlight=False)
        return self.SUCCESS
