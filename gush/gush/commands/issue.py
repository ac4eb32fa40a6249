"""Issue commands: list, show, take."""

from __future__ import annotations

from typing import Any

from rich.table import Table

from .base import BaseCommand

ISSUE_ENUMS: dict[str, tuple[str, ...]] = {
    "state": ("open", "closed", "all"),
    "sort": ("created", "updated", "comments"),
    "direction": ("asc", "desc"),
}


def _issue_type(issue: dict[str, Any]) -> str:
    return "Pull Request" if issue.get("pull_request") else "Issue"


def _login(user: dict[str, Any] | None) -> str:
    return (user or {}).get("login", "")


class IssueListCommand(BaseCommand):
    name = "issue:list"
    ENUMS = ISSUE_ENUMS

    def execute(
        self,
        org: str | None = None,
        repo: str | None = None,
        state: str = "open",
        sort: str = "created",
        direction: str = "desc",
        **options: Any,
    ) -> int:
        self.validate_enum("state", state)
        self.validate_enum("sort", sort)
        self.validate_enum("direction", direction)

        vendor, repository = self.resolve_repository(org, repo)
        issues = self.get_github_client().get(
            f"/repos/{vendor}/{repository}/issues",
            params={"state": state, "sort": sort, "direction": direction},
        ) or []

        if not issues:
            self.app.err_console.print(
                self.render("no_issues", {"state": state, "vendor": vendor, "repository": repository}),
                markup=False,
            )
            return self.SUCCESS

        table = Table(box=None)
        for column in ("#", "State", "Type", "Title", "User", "Created"):
            table.add_column(column)
        for issue in issues:
            table.add_row(
                str(issue["number"]),
                issue.get("state", ""),
                _issue_type(issue),
                issue.get("title", ""),
                _login(issue.get("user")),
                (issue.get("created_at") or "")[:10],
            )
        self.console.print(table)
        return self.SUCCESS


class IssueShowCommand(BaseCommand):
    name = "issue:show"

    def execute(
        self,
        issue_number: int,
        org: str | None = None,
        repo: str | None = None,
        **options: Any,
    ) -> int:
        vendor, repository = self.resolve_repository(org, repo)
        issue = self.get_github_client().get(f"/repos/{vendor}/{repository}/issues/{issue_number}")

        milestone = issue.get("milestone") or {}
        self.console.print(
            self.render(
                "issue_show",
                {
                    "number": issue["number"],
                    "state": issue.get("state", ""),
                    "user": _login(issue.get("user")),
                    "assignee": _login(issue.get("assignee")),
                    "type": _issue_type(issue),
                    "milestone": milestone.get("title", "None"),
                    "labels": ", ".join(label["name"] for label in issue.get("labels", [])),
                    "title": issue.get("title", ""),
                    "body": issue.get("body") or "",
                },
            ),
            markup=False,
            highlight=False,
        )
        return self.SUCCESS


class IssueTakeCommand(BaseCommand):
    """Start a local branch named after an issue."""

    name = "issue:take"

    def execute(
        self,
        issue_number: int,
        base_branch: str | None = None,
        org: str | None = None,
        repo: str | None = None,
        **options: Any,
    ) -> int:
        vendor, repository = self.resolve_repository(org, repo)
        issue = self.get_github_client().get(f"/repos/{vendor}/{repository}/issues/{issue_number}")

        base = base_branch or self.get_parameter("base") or "main"
        remote = self.get_parameter("remote") or "origin"
        branch = self.get_slugifier().slugify(f"{issue_number} {issue['title']}")

        self.run_commands(
            [
                {"line": "git remote update", "allow_failures": True},
                {"line": f"git checkout {remote}/{base}", "allow_failures": False},
                {"line": f"git checkout -b {branch}", "allow_failures": False},
            ]
        )

        self.console.print(
            self.render("issue_taken", {"number": issue_number, "branch": branch}),
            markup=False,
            highlight=False,
        )
        return self.SUCCESS
