"""Slugs for branch names and similar identifiers."""

from __future__ import annotations

import re
import unicodedata


class SlugGenerator:
    """Latin transliteration followed by separator normalization."""

    def __init__(self, separator: str = "-", max_length: int | None = None):
        self.separator = separator
        self.max_length = max_length

    def transliterate(self, text: str) -> str:
        # NFKD splits accented letters into base letter + combining mark
        decomposed = unicodedata.normalize("NFKD", text)
        return decomposed.encode("ascii", "ignore").decode("ascii")

    def slugify(self, text: str) -> str:
        ascii_text = self.transliterate(text).lower()
        slug = re.sub(r"[^a-z0-9]+", self.separator, ascii_text).strip(self.separator)
        if self.max_length is not None:
            slug = slug[: self.max_length].rstrip(self.separator)
        return slug
