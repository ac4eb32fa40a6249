"""
Secret references in configuration.

Configuration values may hold a reference instead of the secret itself,
so the token never has to be written into ~/.gush.yml:

- env:VAR_NAME - environment variable

Plain values (no known prefix) are returned unchanged.
"""

from __future__ import annotations

import os
from typing import Protocol


class SecretsProvider(Protocol):
    """Protocol for resolving secret references to values."""

    def supports(self, ref: str) -> bool:
        ...

    def get(self, ref: str) -> str | None:
        ...


class EnvSecretsProvider:
    """
    Resolve secrets from environment variables.

    Example: "env:GITHUB_TOKEN" resolves to os.environ["GITHUB_TOKEN"]
    """

    PREFIX = "env:"

    def supports(self, ref: str) -> bool:
        return ref.startswith(self.PREFIX)

    def get(self, ref: str) -> str | None:
        if not self.supports(ref):
            return None
        return os.environ.get(ref[len(self.PREFIX) :])


def resolve_secret(value: str | None, providers: list[SecretsProvider] | None = None) -> str | None:
    """Resolve value if it is a reference, else return it as is."""
    if value is None:
        return None
    for provider in providers or [EnvSecretsProvider()]:
        if provider.supports(value):
            return provider.get(value)
    return value
