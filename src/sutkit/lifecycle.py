"""Base test classes with an ordered lifecycle.

`BaseTest` runs per-test hooks around every test method and per-class hooks
around every test class. `BaseTestWithSut` adds a subject under test (SUT)
created before each test. The order of the calls is:

1. `BaseTest.before_each_test`
2. `BaseTestWithSut.before_create_sut`
3. `BaseTestWithSut.create_sut`
4. `BaseTestWithSut.after_create_sut`
5. the test method
6. `BaseTest.dispose`, which runs `BaseTest.after_each_test`

pytest drives the order through autouse fixtures. Other runners can call
`set_up` and `dispose` directly.
"""

from __future__ import annotations

import abc
import logging
from collections.abc import Iterator
from typing import Any, Generic, TypeVar

import pytest

from sutkit.errors import LifecycleError, SubjectNotCreatedError
from sutkit.mocking.handle import MockHandle

logger = logging.getLogger(__name__)

ContractT = TypeVar("ContractT")

_MISSING: Any = object()


class BaseTest:
    """Base test with per-test and per-class hooks.

    Subclasses override the hooks they need; every hook is a no-op by default.
    """

    # set by the lifecycle fixture; None when driven without pytest
    pytest_config: pytest.Config | None = None
    pytest_node: pytest.Item | None = None

    @pytest.fixture(autouse=True, scope="class")
    @classmethod
    def _sutkit_suite(cls) -> Iterator[None]:
        """Run the class hooks once around all the tests of a class."""
        cls.before_all_tests()
        yield
        cls.after_all_tests()

    @pytest.fixture(autouse=True)
    def _sutkit_lifecycle(self, request: pytest.FixtureRequest) -> Iterator[None]:
        """Run `set_up` before and `dispose` after the test method."""
        self.pytest_config = request.config
        self.pytest_node = request.node
        self.set_up()
        yield
        self.dispose()

    # --- Hooks ---

    @classmethod
    def before_all_tests(cls) -> None:
        """Placeholder to run once before the tests of the class."""

    @classmethod
    def after_all_tests(cls) -> None:
        """Placeholder to run once after the tests of the class."""

    def before_each_test(self) -> None:
        """Placeholder for optional initialization before each test."""

    def after_each_test(self) -> None:
        """Placeholder to clean up after each test."""

    # --- Entry points ---

    def set_up(self) -> None:
        """Prepare the test; called before the test method."""
        logger.debug("Setting up %s", type(self).__name__)
        self.before_each_test()

    def dispose(self) -> None:
        """Clean up after the test method."""
        logger.debug("Disposing %s", type(self).__name__)
        self.after_each_test()

    def abort(self) -> None:
        """Clean up after a set-up that failed part-way."""
        self.after_each_test()

    # --- Helpers ---

    def mock_of(self, interface: type[Any]) -> Any:
        """Create a fake of ``interface``."""
        return MockHandle(interface).object

    @staticmethod
    def handle_of(fake: object) -> MockHandle[Any]:
        """Return the `MockHandle` behind a fake, to configure or verify it."""
        return MockHandle.of(fake)


class BaseTestWithSut(BaseTest, abc.ABC, Generic[ContractT]):
    """Base test with a subject under test created before each test.

    If any step after `before_each_test` raises, `abort` runs the cleanup
    hooks already entered and the error propagates, so the test fails before
    its body runs.
    """

    _sut: ContractT = _MISSING

    @property
    def sut(self) -> ContractT:
        """The subject under test.

        Raises:
            SubjectNotCreatedError: If the subject was not created yet.
        """
        if self._sut is _MISSING:
            raise SubjectNotCreatedError(type(self).__name__)
        return self._sut

    @property
    def sut_created(self) -> bool:
        """True once `create_sut` has returned."""
        return self._sut is not _MISSING

    def set_up(self) -> None:
        super().set_up()
        try:
            self._build_subject()
        except Exception:
            logger.exception("Set-up of %s failed; cleaning up", type(self).__name__)
            self.abort()
            raise

    def _build_subject(self) -> None:
        self.before_create_sut()
        subject = self.create_sut()
        if self.sut_created:
            raise LifecycleError(f"{type(self).__name__} already created its subject")
        self._sut = subject
        logger.debug("Created subject %s", type(subject).__name__)
        self.after_create_sut()

    def before_create_sut(self) -> None:
        """Placeholder to add code before creating the subject."""

    def after_create_sut(self) -> None:
        """Placeholder to add code after creating the subject."""

    @abc.abstractmethod
    def create_sut(self) -> ContractT:
        """Create the subject under test."""
