"""Release commands."""

from __future__ import annotations

from typing import Any

from rich.table import Table

from .base import BaseCommand


def _yes_no(value: Any) -> str:
    return "yes" if value else "no"


class ReleaseListCommand(BaseCommand):
    name = "release:list"

    def execute(self, org: str | None = None, repo: str | None = None, **options: Any) -> int:
        vendor, repository = self.resolve_repository(org, repo)
        releases = self.get_github_client().get(f"/repos/{vendor}/{repository}/releases") or []

        if not releases:
            self.app.err_console.print(
                self.render("no_releases", {"vendor": vendor, "repository": repository}),
                markup=False,
            )
            return self.SUCCESS

        table = Table(box=None)
        for column in ("ID", "Name", "Tag", "Commitish", "Draft", "Prerelease", "Created", "Published"):
            table.add_column(column)
        for release in releases:
            table.add_row(
                str(release["id"]),
                release.get("name") or "",
                release.get("tag_name") or "",
                release.get("target_commitish") or "",
                _yes_no(release.get("draft")),
                _yes_no(release.get("prerelease")),
                (release.get("created_at") or "")[:10],
                (release.get("published_at") or "")[:10],
            )
        self.console.print(table)
        return self.SUCCESS
