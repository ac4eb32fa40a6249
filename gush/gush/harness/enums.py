"""Closed value sets for command options."""

from __future__ import annotations

from typing import Iterable, Mapping

from .errors import InvalidEnumValueError, UnknownEnumError


class EnumValidator:
    """
    Named enum definitions for one command.

    Membership is an exact string match: no case folding, no trimming.
    Definition order is kept only so descriptions read the way they were
    declared.
    """

    def __init__(self) -> None:
        self._definitions: dict[str, tuple[str, ...]] = {}

    @classmethod
    def from_definitions(cls, definitions: Mapping[str, Iterable[str]]) -> EnumValidator:
        validator = cls()
        for name, allowed in definitions.items():
            validator.define(name, allowed)
        return validator

    def define(self, name: str, allowed_values: Iterable[str]) -> None:
        # dict.fromkeys drops duplicates but keeps first-seen order
        self._definitions[name] = tuple(dict.fromkeys(allowed_values))

    def is_defined(self, name: str) -> bool:
        return name in self._definitions

    def values(self, name: str) -> tuple[str, ...]:
        if name not in self._definitions:
            raise UnknownEnumError(name)
        return self._definitions[name]

    def validate(self, name: str, value: str) -> None:
        """
        Check that value belongs to the named enum.

        Raises:
            UnknownEnumError: If name was never defined.
            InvalidEnumValueError: If value is not an allowed value.
        """
        allowed = self.values(name)
        if value not in allowed:
            raise InvalidEnumValueError(name, value, allowed)

    def describe(self, name: str) -> str:
        """Help text for the named enum, e.g. 'One of open, closed'."""
        return "One of " + ", ".join(self.values(name))
