"""Auto-mocking container: builds subjects with every dependency mocked."""

from __future__ import annotations

import inspect
import logging
import types
import typing
from collections.abc import Mapping
from typing import Any, TypeVar

from sutkit.errors import ConfigurationError, UnresolvableDependencyError

from .factory import MockFactory
from .handle import MockHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")

_UNION_TYPES = (typing.Union, types.UnionType)


def _dependency_type(annotation: Any) -> type | None:
    """Return the class a parameter annotation asks for, if it can be mocked.

    ``Optional[X]`` and ``X | None`` unwrap to ``X``. Builtins (``str``,
    ``int``...) and anything that is not a plain class cannot be mocked.
    """
    if typing.get_origin(annotation) in _UNION_TYPES:
        members = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(members) != 1:
            return None
        annotation = members[0]
    if not isinstance(annotation, type) or annotation.__module__ == "builtins":
        return None
    return annotation


class AutoMockContainer:
    """A scoped map from interfaces to fakes, able to build a subject.

    Lookups are lazy and memoized: the first `resolve` of an interface creates
    its fake through the factory and every later lookup returns the same
    object. Explicit fakes registered with `register` take the place of
    generated ones.

    Args:
        factory: The factory that creates and tracks generated mocks.
    """

    def __init__(self, factory: MockFactory) -> None:
        self.factory = factory
        self._handles: dict[type, MockHandle] = {}
        self._explicit: dict[type, object] = {}

    def __contains__(self, interface: type) -> bool:
        return interface in self._handles or interface in self._explicit

    def register(self, interface: type[T], instance: T) -> None:
        """Register a hand-written fake for ``interface``.

        Raises:
            ConfigurationError: If ``interface`` was already resolved.
        """
        if interface in self:
            raise ConfigurationError(
                f"{interface.__name__} was already resolved; register it before first use"
            )
        self._explicit[interface] = instance
        logger.debug("Registered explicit %s for %s", type(instance).__name__, interface.__name__)

    def resolve(self, interface: type[T]) -> T:
        """Return the fake standing in for ``interface``, creating it on first use."""
        if interface in self._explicit:
            return typing.cast(T, self._explicit[interface])
        return self.handle_for(interface).object

    def handle_for(self, interface: type[T]) -> MockHandle[T]:
        """Return the handle of the generated fake for ``interface``.

        Raises:
            ConfigurationError: If ``interface`` has an explicit fake, which
                has no handle.
        """
        if interface in self._explicit:
            raise ConfigurationError(
                f"{interface.__name__} is an explicitly registered fake and cannot be configured"
            )
        if (handle := self._handles.get(interface)) is None:
            handle = self.factory.create(interface)
            self._handles[interface] = handle
            logger.debug("Resolved new mock for %s", interface.__name__)
        return handle

    def dependencies_of(self, cls: type, overrides: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """Build the keyword arguments that satisfy ``cls``'s constructor.

        Each parameter is filled from ``overrides`` first, then from the fake
        of its annotated class; parameters with a default are left to it.

        Raises:
            UnresolvableDependencyError: If a parameter without a default has
                no usable class annotation.
        """
        overrides = dict(overrides or {})
        init = cls.__init__
        try:
            hints = {} if init is object.__init__ else typing.get_type_hints(init)
        except (NameError, TypeError) as exc:
            raise UnresolvableDependencyError(cls, "__init__", f"bad annotations: {exc}") from exc

        dependencies: dict[str, Any] = {}
        for name, param in inspect.signature(cls).parameters.items():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if param.kind is param.POSITIONAL_ONLY:
                raise UnresolvableDependencyError(cls, name, "positional-only parameters are not supported")
            if name in overrides:
                dependencies[name] = overrides.pop(name)
            elif (dependency := _dependency_type(hints.get(name))) is not None:
                dependencies[name] = self.resolve(dependency)
            elif param.default is param.empty:
                raise UnresolvableDependencyError(cls, name, "no mockable annotation and no default")
        if overrides:
            raise UnresolvableDependencyError(
                cls, ", ".join(sorted(overrides)), "not a constructor parameter"
            )
        return dependencies

    def create(self, cls: type[T], **overrides: Any) -> T:
        """Instantiate ``cls`` with every constructor dependency satisfied.

        Args:
            cls: The concrete class to build.
            **overrides: Explicit values for some constructor parameters.

        Returns:
            A new instance of ``cls``.
        """
        dependencies = self.dependencies_of(cls, overrides)
        logger.debug(
            "Creating %s with %s", cls.__name__, ", ".join(dependencies) or "no dependencies"
        )
        return cls(**dependencies)
