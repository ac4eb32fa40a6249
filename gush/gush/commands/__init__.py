"""Concrete gush commands, each a thin call site over the harness."""

from __future__ import annotations

from .base import BaseCommand
from .branch import BranchPushCommand
from .issue import IssueListCommand, IssueShowCommand, IssueTakeCommand
from .pull_request import PullRequestLabelListCommand
from .release import ReleaseListCommand
from .repo import RepoInfoCommand

__all__ = [
    "BaseCommand",
    "BranchPushCommand",
    "IssueListCommand",
    "IssueShowCommand",
    "IssueTakeCommand",
    "PullRequestLabelListCommand",
    "ReleaseListCommand",
    "RepoInfoCommand",
]
