"""Argument matchers for mock expectations.

Expected arguments are compared to actual arguments with ``expected == actual``,
so any object defining ``__eq__`` can act as a matcher. This module provides
the common ones:

* `ANY` matches every value (re-exported from `unittest.mock`).
* `that(predicate)` matches values for which ``predicate`` returns true.
* `instance_of(cls)` matches instances of ``cls``.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any
from unittest.mock import ANY

__all__ = ["ANY", "Matcher", "instance_of", "that"]

# pylint: disable=too-few-public-methods


class Matcher:
    """A value that compares equal to anything satisfying its predicate."""

    def __init__(self, predicate: Callable[[Any], bool], description: str) -> None:
        self._predicate = predicate
        self._description = description

    def __eq__(self, other: object) -> bool:
        return bool(self._predicate(other))

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"<{self._description}>"


def that(predicate: Callable[[Any], bool], description: str | None = None) -> Matcher:
    """Match any argument for which ``predicate`` returns true."""
    name = getattr(predicate, "__name__", "predicate")
    return Matcher(predicate, description or f"that {name}")


def instance_of(cls: type) -> Matcher:
    """Match any argument that is an instance of ``cls``."""
    return Matcher(lambda value: isinstance(value, cls), f"instance of {cls.__name__}")
