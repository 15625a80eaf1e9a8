"""Mock factory: creates, tracks and verifies mock handles for one test."""

from __future__ import annotations

import logging
from typing import TypeVar

from sutkit.errors import MockVerificationError

from .handle import MockHandle
from .mode import MockMode

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MockFactory:
    """Creates mocks and verifies all of them together.

    The factory remembers every handle it created so that teardown can check
    the whole set at once. Two verification flavours exist:

    * `verify` (selective) only looks at handles with configured
      expectations and checks that each expectation was met.
    * `verify_all` (full) checks every expectation of every handle and also
      fails on any call that matched no expectation.

    `verify_for_mode` picks the flavour matching `mode`.

    Args:
        mode: The verification mode; `MockMode.LENIENT` by default.
    """

    def __init__(self, mode: MockMode = MockMode.LENIENT) -> None:
        self.mode = mode
        self._handles: list[MockHandle] = []

    @property
    def handles(self) -> list[MockHandle]:
        """Handles created by this factory, oldest first."""
        return list(self._handles)

    def create(self, interface: type[T]) -> MockHandle[T]:
        """Create and track a new mock of ``interface``."""
        handle = MockHandle(interface)
        self._handles.append(handle)
        return handle

    def verify(self) -> None:
        """Check the expectations of configured mocks only.

        Raises:
            MockVerificationError: If any configured expectation was not met.
        """
        self._raise_if_failed(
            [
                failure
                for handle in self._handles
                if handle.has_expectations
                for failure in handle.failures(include_unexpected=False)
            ]
        )

    def verify_all(self) -> None:
        """Check every mock: all expectations met and no unexpected calls.

        Raises:
            MockVerificationError: If any expectation was not met or any mock
                received a call that matched no expectation.
        """
        self._raise_if_failed(
            [
                failure
                for handle in self._handles
                for failure in handle.failures(include_unexpected=True)
            ]
        )

    def verify_for_mode(self) -> None:
        """Run `verify_all` in strict mode and `verify` in lenient mode."""
        logger.debug(
            "Verifying %d mocks in %s mode", len(self._handles), self.mode.value
        )
        if self.mode is MockMode.STRICT:
            self.verify_all()
        else:
            self.verify()

    @staticmethod
    def _raise_if_failed(failures: list[str]) -> None:
        if failures:
            logger.debug("Mock verification failed with %d failures", len(failures))
            raise MockVerificationError(failures)
