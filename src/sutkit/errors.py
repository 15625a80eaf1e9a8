"""Errors raised by the sutkit harness."""

from __future__ import annotations

from collections.abc import Sequence

# ============================================================================
#                               Base error
# ============================================================================


class SutkitError(Exception):
    """Base class for all harness errors."""


# ============================================================================
#                         Configuration (misuse) errors
# ============================================================================


class ConfigurationError(SutkitError):
    """Raised when the harness is configured in an unsupported way."""


class MockConfigurationError(ConfigurationError):
    """Raised when an expectation cannot be configured on a mock.

    ``interface`` is the faked class, or its name when only the name is known.
    """

    def __init__(self, interface: type | str, member: str, reason: str) -> None:
        name = interface if isinstance(interface, str) else interface.__name__
        super().__init__(f"Cannot configure {name}.{member}: {reason}")
        self.interface = interface
        self.member = member


class InvalidMockModeError(ConfigurationError):
    """Raised when a mock mode value cannot be parsed."""

    def __init__(self, value: str) -> None:
        super().__init__(
            f"Invalid mock mode {value!r}; expected 'lenient' or 'strict'"
        )
        self.value = value


class UnresolvableDependencyError(ConfigurationError):
    """Raised when a constructor parameter cannot be satisfied by the container."""

    def __init__(self, owner: type, parameter: str, reason: str | None = None) -> None:
        message = f"Cannot resolve parameter '{parameter}' of {owner.__name__}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.owner = owner
        self.parameter = parameter


# ============================================================================
#                               Lifecycle errors
# ============================================================================


class LifecycleError(SutkitError):
    """Raised when a lifecycle step runs out of order or more than once."""


class SubjectNotCreatedError(LifecycleError):
    """Raised when the subject under test is read before it was created."""

    def __init__(self, test_name: str) -> None:
        super().__init__(f"{test_name} has not created its subject under test yet")
        self.test_name = test_name


# ============================================================================
#                             Verification errors
# ============================================================================


class MockVerificationError(SutkitError, AssertionError):
    """Raised when mock expectations are not met.

    Subclasses `AssertionError` so test runners report it as a failed
    assertion rather than an error.
    """

    def __init__(self, failures: Sequence[str]) -> None:
        self.failures = list(failures)
        lines = "\n".join(f"  - {failure}" for failure in self.failures)
        super().__init__(f"Mock verification failed:\n{lines}")
