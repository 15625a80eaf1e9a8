"""Mock handles: the programmable side of a generated fake.

A `MockHandle` wraps a fake produced by `unittest.mock.create_autospec`, so the
fake is an instance of the interface it stands in for and rejects calls that
do not fit the interface's signatures. Every public method (and ``__call__``
on callable interfaces) is routed through the handle, which:

* records each call as an `Invocation`,
* answers it from the most recently configured matching `Expectation`,
* falls back to an empty default derived from the return annotation, and
  records the call as *unexpected* when no expectation matches.

Properties are routed the same way through a `unittest.mock.PropertyMock`
attached to the fake's private mock type.

Example:
    ```py
    handle = MockHandle(PosterService)
    handle.setup("find_poster", movie).returns("MyPoster")
    assert handle.object.find_poster(movie) == "MyPoster"
    handle.verify("find_poster", movie)
    ```
"""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar
from unittest.mock import PropertyMock, create_autospec

from sutkit.errors import ConfigurationError, MockConfigurationError, MockVerificationError

from .defaults import default_for, return_annotation

logger = logging.getLogger(__name__)

T = TypeVar("T")

HANDLE_ATTRIBUTE = "_sutkit_handle"  # pragma: no mutate
CALL = "__call__"

METHOD = "method"
PROPERTY = "property"


# ============================================================================
#                               Records
# ============================================================================


@dataclass(frozen=True)
class Times:
    """An inclusive call-count constraint."""

    minimum: int = 1
    maximum: int | None = None

    def __post_init__(self) -> None:
        if self.minimum < 0:
            raise ValueError(f"call count must not be negative, got {self.minimum}")
        if self.maximum is not None and self.maximum < self.minimum:
            raise ValueError(f"maximum {self.maximum} is below minimum {self.minimum}")

    @classmethod
    def exactly(cls, count: int) -> Times:
        """Exactly ``count`` calls."""
        return cls(count, count)

    def allows(self, count: int) -> bool:
        """Return True if ``count`` satisfies the constraint."""
        if count < self.minimum:
            return False
        return self.maximum is None or count <= self.maximum

    def describe(self) -> str:
        """Human readable form, e.g. "exactly 2 times"."""
        if self.maximum is None:
            return "at least once" if self.minimum == 1 else f"at least {self.minimum} times"
        if self.minimum == self.maximum:
            return "never" if self.minimum == 0 else f"exactly {self.minimum} times"
        return f"between {self.minimum} and {self.maximum} times"


@dataclass(frozen=True)
class Invocation:
    """A call recorded on a fake."""

    member: str
    arguments: dict[str, Any]
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)

    def describe(self, owner: str) -> str:
        """Render the call as ``Owner.member(name=value, ...)``."""
        return _describe_call(owner, self.member, self.arguments)


def _describe_call(owner: str, member: str, arguments: dict[str, Any]) -> str:
    rendered = ", ".join(f"{name}={value!r}" for name, value in arguments.items())
    if member == CALL:
        return f"{owner}({rendered})"
    return f"{owner}.{member}({rendered})"


def _arguments_match(expected: dict[str, Any], actual: dict[str, Any]) -> bool:
    if expected.keys() != actual.keys():
        return False
    # expected on the left so matchers decide equality
    return all(
        exp is act or bool(exp == act)
        for exp, act in ((expected[name], actual[name]) for name in expected)
    )


# ============================================================================
#                               Expectation
# ============================================================================


class Expectation:
    """A configured response for calls to one member with matching arguments.

    Expectations are built through `MockHandle.setup` and refined fluently:

        handle.setup("is_violent", movie).returns(True).times(1)

    Unless constrained otherwise, an expectation must be met at least once.
    """

    def __init__(
        self,
        owner: str,
        member: str,
        arguments: dict[str, Any],
        default: Callable[[], Any],
    ) -> None:
        self.owner = owner
        self.member = member
        self.arguments = arguments
        self.constraint = Times()
        self.call_count = 0
        self._default = default
        self._responder: Callable[[Invocation], Any] | None = None

    # --- Behaviour ---

    def returns(self, value: Any) -> Expectation:
        """Answer matching calls with ``value``."""
        self._responder = lambda invocation: value
        return self

    def raises(self, exc: BaseException | type[BaseException]) -> Expectation:
        """Raise ``exc`` from matching calls."""

        def _raise(invocation: Invocation) -> Any:
            raise exc

        self._responder = _raise
        return self

    def calls(self, fn: Callable[..., Any]) -> Expectation:
        """Answer matching calls with ``fn(*args, **kwargs)`` of the actual call."""
        self._responder = lambda invocation: fn(*invocation.args, **invocation.kwargs)
        return self

    # --- Call-count constraints ---

    def times(self, count: int) -> Expectation:
        """Require exactly ``count`` matching calls."""
        self.constraint = self._constraint(count, count)
        return self

    def at_least(self, count: int) -> Expectation:
        """Require ``count`` or more matching calls (``0`` makes it optional)."""
        self.constraint = self._constraint(count, None)
        return self

    def _constraint(self, minimum: int, maximum: int | None) -> Times:
        try:
            return Times(minimum, maximum)
        except ValueError as exc:
            raise MockConfigurationError(self.owner, self.member, str(exc)) from exc

    # --- Used by MockHandle ---

    def matches(self, invocation: Invocation) -> bool:
        """Return True if ``invocation`` targets this member with matching arguments."""
        return invocation.member == self.member and _arguments_match(
            self.arguments, invocation.arguments
        )

    def respond(self, invocation: Invocation) -> Any:
        """Count the call and produce its answer."""
        self.call_count += 1
        if self._responder is None:
            return self._default()
        return self._responder(invocation)

    @property
    def is_met(self) -> bool:
        """True if the call count satisfies the constraint."""
        return self.constraint.allows(self.call_count)

    def describe(self) -> str:
        """Describe the expected call."""
        return _describe_call(self.owner, self.member, self.arguments)

    def __repr__(self) -> str:
        return f"<Expectation {self.describe()} {self.constraint.describe()}>"


# ============================================================================
#                               MockHandle
# ============================================================================


def _public_members(interface: type) -> dict[str, str]:
    """Map the routable members of ``interface`` to their kind."""
    members: dict[str, str] = {}
    for name in dir(interface):
        if name.startswith("_"):
            continue
        attribute = inspect.getattr_static(interface, name)
        if isinstance(attribute, property):
            members[name] = PROPERTY
        elif inspect.isfunction(attribute) or isinstance(
            attribute, (staticmethod, classmethod)
        ):
            members[name] = METHOD
    if any(CALL in vars(base) for base in interface.__mro__ if base is not object):
        members[CALL] = METHOD
    return members


def _member_signature(interface: type, member: str) -> inspect.Signature:
    attribute = inspect.getattr_static(interface, member)
    if isinstance(attribute, staticmethod):
        return inspect.signature(attribute.__func__)
    signature = inspect.signature(getattr(interface, member))
    if isinstance(attribute, classmethod):
        return signature  # already bound to the class
    parameters = list(signature.parameters.values())[1:]  # drop self
    return signature.replace(parameters=parameters)


class MockHandle(Generic[T]):
    """The programmable handle behind one fake of ``interface``.

    Args:
        interface: The class (usually an `abc.ABC`) the fake conforms to.

    Attributes:
        interface: The faked interface.
        object: The fake itself; pass this to the code under test.
    """

    def __init__(self, interface: type[T]) -> None:
        self.interface = interface
        self._members = _public_members(interface)
        self._signatures: dict[str, inspect.Signature] = {}
        self._expectations: list[Expectation] = []
        self._invocations: list[Invocation] = []
        self._unexpected: list[Invocation] = []
        self.object: T = create_autospec(interface, instance=True)
        self._install_dispatchers()
        setattr(self.object, HANDLE_ATTRIBUTE, self)
        logger.debug("Created mock of %s", self.name)

    @property
    def name(self) -> str:
        """Name of the faked interface."""
        return self.interface.__name__

    @classmethod
    def of(cls, fake: object) -> MockHandle[Any]:
        """Return the handle behind a fake created by this module.

        Raises:
            ConfigurationError: If ``fake`` was not created by a `MockHandle`.
        """
        handle = getattr(fake, HANDLE_ATTRIBUTE, None)
        if not isinstance(handle, MockHandle):
            raise ConfigurationError(f"{fake!r} is not a fake created by sutkit")
        return handle

    # --- Configuration ---

    def setup(self, member: str, /, *args: Any, **kwargs: Any) -> Expectation:
        """Configure an expectation for a method call.

        Args:
            member: Method name (``"__call__"`` for callable interfaces).
            *args: Expected positional arguments or matchers.
            **kwargs: Expected keyword arguments or matchers.

        Raises:
            MockConfigurationError: If the member is not a method of the
                interface or the arguments do not fit its signature.
        """
        self._require(member, METHOD)
        arguments = self._bind_expected(member, args, kwargs)
        return self._add_expectation(member, arguments)

    def setup_get(self, name: str) -> Expectation:
        """Configure an expectation for reading a property.

        Raises:
            MockConfigurationError: If ``name`` is not a property of the interface.
        """
        self._require(name, PROPERTY)
        return self._add_expectation(name, {})

    @property
    def expectations(self) -> list[Expectation]:
        """Configured expectations, oldest first."""
        return list(self._expectations)

    @property
    def has_expectations(self) -> bool:
        """True if at least one expectation was configured."""
        return bool(self._expectations)

    # --- Recorded calls ---

    @property
    def invocations(self) -> list[Invocation]:
        """Every call recorded on the fake, in order."""
        return list(self._invocations)

    @property
    def unexpected_invocations(self) -> list[Invocation]:
        """Calls that matched no expectation."""
        return list(self._unexpected)

    def calls_to(self, member: str, /, *args: Any, **kwargs: Any) -> list[Invocation]:
        """Recorded calls to ``member`` whose arguments match ``args``/``kwargs``.

        Without arguments every call to ``member`` is returned.
        """
        if member not in self._members:
            raise MockConfigurationError(self.interface, member, "no such member")
        if not args and not kwargs:
            return [inv for inv in self._invocations if inv.member == member]
        expected = self._bind_expected(member, args, kwargs)
        return [
            inv
            for inv in self._invocations
            if inv.member == member and _arguments_match(expected, inv.arguments)
        ]

    # --- Verification ---

    def verify(self, member: str, /, *args: Any, **kwargs: Any) -> None:
        """Assert that ``member`` was called at least once with matching arguments.

        Raises:
            MockVerificationError: If no matching call was recorded.
        """
        self._verify_count(Times(), member, args, kwargs)

    def verify_times(self, member: str, count: int, /, *args: Any, **kwargs: Any) -> None:
        """Assert that ``member`` was called exactly ``count`` times with matching arguments.

        Raises:
            MockConfigurationError: If ``count`` is negative.
        """
        if count < 0:
            raise MockConfigurationError(
                self.interface, member, f"call count must not be negative, got {count}"
            )
        self._verify_count(Times.exactly(count), member, args, kwargs)

    def verify_called(self, *args: Any, **kwargs: Any) -> None:
        """`verify` for callable interfaces."""
        self.verify(CALL, *args, **kwargs)

    def verify_called_times(self, count: int, /, *args: Any, **kwargs: Any) -> None:
        """`verify_times` for callable interfaces."""
        self.verify_times(CALL, count, *args, **kwargs)

    def failures(self, *, include_unexpected: bool) -> list[str]:
        """Describe unmet expectations and, optionally, unexpected calls."""
        failures = [
            f"{exp.describe()} expected {exp.constraint.describe()}, "
            f"called {exp.call_count} times"
            for exp in self._expectations
            if not exp.is_met
        ]
        if include_unexpected:
            failures.extend(
                f"unexpected call {inv.describe(self.name)}" for inv in self._unexpected
            )
        return failures

    # --- Internals ---

    def _verify_count(
        self, constraint: Times, member: str, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> None:
        matching = self.calls_to(member, *args, **kwargs)
        if constraint.allows(len(matching)):
            return
        expected = (
            _describe_call(self.name, member, self._bind_expected(member, args, kwargs))
            if args or kwargs
            else _describe_call(self.name, member, {})
        )
        recorded = [inv.describe(self.name) for inv in self._invocations] or ["<none>"]
        raise MockVerificationError(
            [
                f"{expected} expected {constraint.describe()}, called {len(matching)} times",
                "recorded calls: " + "; ".join(recorded),
            ]
        )

    def _require(self, member: str, kind: str) -> None:
        actual = self._members.get(member)
        if actual is None:
            raise MockConfigurationError(self.interface, member, "no such member")
        if actual != kind:
            hint = "use setup_get()" if actual == PROPERTY else "use setup()"
            raise MockConfigurationError(self.interface, member, f"is a {actual}; {hint}")

    def _signature(self, member: str) -> inspect.Signature:
        if member not in self._signatures:
            self._signatures[member] = _member_signature(self.interface, member)
        return self._signatures[member]

    def _bind(self, member: str, args: tuple[Any, ...], kwargs: dict[str, Any]) -> dict[str, Any]:
        if self._members.get(member) == PROPERTY:
            return {"value": args[0]} if args else {}
        bound = self._signature(member).bind(*args, **kwargs)
        bound.apply_defaults()
        return dict(bound.arguments)

    def _bind_expected(
        self, member: str, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> dict[str, Any]:
        try:
            return self._bind(member, args, kwargs)
        except TypeError as exc:
            raise MockConfigurationError(self.interface, member, str(exc)) from exc

    def _default_factory(self, member: str) -> Callable[[], Any]:
        annotation = return_annotation(self.interface, member)
        return lambda: default_for(annotation)

    def _add_expectation(self, member: str, arguments: dict[str, Any]) -> Expectation:
        expectation = Expectation(self.name, member, arguments, self._default_factory(member))
        self._expectations.append(expectation)
        logger.debug("Configured %r", expectation)
        return expectation

    def _install_dispatchers(self) -> None:
        for member, kind in self._members.items():
            dispatcher = functools.partial(self._dispatch, member)
            if kind == PROPERTY:
                # PropertyMock must live on the mock's private type
                setattr(type(self.object), member, PropertyMock(side_effect=dispatcher))
            elif member == CALL:
                self.object.side_effect = dispatcher
            else:
                getattr(self.object, member).side_effect = dispatcher

    def _dispatch(self, member: str, /, *args: Any, **kwargs: Any) -> Any:
        invocation = Invocation(member, self._bind(member, args, kwargs), args, kwargs)
        self._invocations.append(invocation)
        if self._members[member] == PROPERTY and args:
            # property assignment is never configured
            self._unexpected.append(invocation)
            return None
        for expectation in reversed(self._expectations):
            if expectation.matches(invocation):
                return expectation.respond(invocation)
        logger.debug("Unexpected call %s", invocation.describe(self.name))
        self._unexpected.append(invocation)
        return self._default_factory(member)()

    def __repr__(self) -> str:
        return (
            f"<MockHandle {self.name}: {len(self._expectations)} expectations, "
            f"{len(self._invocations)} calls>"
        )
