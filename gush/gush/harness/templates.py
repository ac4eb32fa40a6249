"""
Message templates.

A template body holds `{{ name }}` markers. Rendering replaces markers
key by key: every occurrence of the first key's marker is replaced across
the whole string, then the second key's, and so on. A value inserted by an
earlier key can therefore be rewritten by a later key if it happens to
contain that key's marker. Markers with no value are left as they are.
"""

from __future__ import annotations

import tomllib
from importlib import resources
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from .errors import UnknownTemplateError

BUNDLED_CATALOG = "messages.toml"


def marker(name: str) -> str:
    """The literal marker for a placeholder name."""
    return "{{ " + name + " }}"


class TemplateCatalog(Mapping[str, str]):
    """Immutable template id -> body mapping, built once at start-up."""

    def __init__(self, templates: Mapping[str, str]):
        self._templates = MappingProxyType(dict(templates))

    def __getitem__(self, template_id: str) -> str:
        try:
            return self._templates[template_id]
        except KeyError:
            raise UnknownTemplateError(template_id) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._templates)

    def __len__(self) -> int:
        return len(self._templates)

    @classmethod
    def from_toml(cls, text: str) -> TemplateCatalog:
        """
        Parse a catalog from TOML text.

        Bodies live in a [templates] table; non-string entries are rejected.
        """
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Failed to parse template catalog: {e}") from e

        raw = data.get("templates")
        if not isinstance(raw, dict):
            raise ValueError("Template catalog missing [templates] table")

        templates: dict[str, str] = {}
        for template_id, body in raw.items():
            if not isinstance(body, str):
                raise ValueError(f"Template '{template_id}' must be a string")
            templates[template_id] = body
        return cls(templates)

    @classmethod
    def bundled(cls) -> TemplateCatalog:
        """The catalog shipped with the package."""
        text = resources.files("gush.templates").joinpath(BUNDLED_CATALOG).read_text(encoding="utf-8")
        return cls.from_toml(text)


class TemplateRenderer:
    """Render catalog templates with placeholder values."""

    def __init__(self, catalog: Mapping[str, str]):
        self.catalog = catalog

    def render(self, template_id: str, values: Mapping[str, Any] | None = None) -> str:
        """
        Render a template.

        Raises:
            UnknownTemplateError: If template_id is not in the catalog.
        """
        if template_id not in self.catalog:
            raise UnknownTemplateError(template_id)

        result = self.catalog[template_id]
        for name, value in (values or {}).items():
            result = result.replace(marker(name), str(value))
        return result
