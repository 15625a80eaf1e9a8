"""Empty default values for unconfigured mock members.

Unconfigured calls return a value derived from the member's return annotation
instead of a nested mock, so that, for example, an unconfigured predicate
returning ``bool`` answers ``False`` rather than a truthy mock.
"""

from __future__ import annotations

import collections.abc as cabc
import inspect
import logging
import typing
from typing import Any

logger = logging.getLogger(__name__)

_SCALAR_DEFAULTS: dict[Any, Any] = {
    bool: False,
    int: 0,
    float: 0.0,
    complex: 0j,
    str: "",
    bytes: b"",
}

_EMPTY_FACTORIES: dict[Any, typing.Callable[[], Any]] = {
    list: list,
    dict: dict,
    set: set,
    frozenset: frozenset,
    tuple: tuple,
    cabc.Iterable: list,
    cabc.Collection: list,
    cabc.Sequence: list,
    cabc.MutableSequence: list,
    cabc.Set: frozenset,
    cabc.MutableSet: set,
    cabc.Mapping: dict,
    cabc.MutableMapping: dict,
    cabc.Iterator: lambda: iter(()),
}


def default_for(annotation: Any) -> Any:
    """Return the empty value for a return annotation.

    Args:
        annotation: A resolved annotation (a class, a parametrized generic,
            ``None`` or ``inspect.Signature.empty``).

    Returns:
        ``False``/``0``/``""`` for scalars, a fresh empty container for
        collection types, and ``None`` for everything else.
    """
    origin = typing.get_origin(annotation) or annotation
    if origin in _SCALAR_DEFAULTS:
        return _SCALAR_DEFAULTS[origin]
    if origin in _EMPTY_FACTORIES:
        return _EMPTY_FACTORIES[origin]()
    return None


def return_annotation(interface: type, member: str) -> Any:
    """Resolve the return annotation of ``interface.member``.

    Properties are resolved through their getter. Unresolvable forward
    references fall back to ``inspect.Signature.empty``.
    """
    attribute = inspect.getattr_static(interface, member, None)
    if isinstance(attribute, property):
        attribute = attribute.fget
    elif isinstance(attribute, (staticmethod, classmethod)):
        attribute = attribute.__func__
    if attribute is None:
        return inspect.Signature.empty
    try:
        hints = typing.get_type_hints(attribute)
    except (NameError, TypeError):
        logger.debug("Could not resolve type hints of %s.%s", interface.__name__, member)
        return inspect.Signature.empty
    return hints.get("return", inspect.Signature.empty)
