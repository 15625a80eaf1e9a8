"""Given/When/Then specifications on top of the auto-mock harness.

A specification arranges a scenario, acts once, and exposes each observation
as its own test method:

* **Given**: `Specification.given_that` runs before the subject is created
  and `Specification.and_given_that_after_created` right after.
* **When**: `Specification.when_i_run` runs exactly once per test, after the
  arrange phases and before the test method.
* **Then**: every test method is one independent observation. pytest builds a
  fresh instance per test method, so each observation gets its own When.

Calling `when_i_run` again from an observation raises `LifecycleError`.

Example:
    ```py
    class WhenMediaLibraryFindsThePoster(SimpleMovieLibrarySpecification):
        def given_that(self):
            super().given_that()
            self.movie = self.mock_of(Movie)
            self.stub(PosterService, "find_poster", self.movie).returns("MyPoster")

        def when_i_run(self):
            self.actual = self.sut.poster(self.movie)

        def should_find_the_poster_given_by_the_service(self):
            assert self.actual == "MyPoster"
    ```
"""

from __future__ import annotations

import abc
import functools
import logging
from collections.abc import Callable
from typing import Any, Generic

from sutkit.automock import AutoMockBaseTest, SutT
from sutkit.errors import LifecycleError
from sutkit.lifecycle import ContractT

logger = logging.getLogger(__name__)


def _run_once(when: Callable[[Any], None]) -> Callable[[Any], None]:
    """Guard a `when_i_run` override so it acts once per test.

    Calls made through ``super()`` from inside the action are let through.
    """

    @functools.wraps(when)
    def wrapper(self: Specification[Any, Any]) -> None:
        if self._acting:
            when(self)
            return
        if self._acted:
            raise LifecycleError(f"{type(self).__name__} already ran its action")
        self._acted = True
        self._acting = True
        try:
            logger.debug("When: %s", type(self).__name__)
            when(self)
        finally:
            self._acting = False

    return wrapper


class Specification(AutoMockBaseTest[SutT, ContractT], Generic[SutT, ContractT]):
    """Base class for Given/When/Then specifications."""

    _acted = False
    _acting = False

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "when_i_run" in vars(cls):
            cls.when_i_run = _run_once(vars(cls)["when_i_run"])  # type: ignore[method-assign]

    def before_create_sut(self) -> None:
        super().before_create_sut()
        self.given_that()

    def after_create_sut(self) -> None:
        super().after_create_sut()
        self.and_given_that_after_created()

    def _build_subject(self) -> None:
        super()._build_subject()
        self.when_i_run()

    def given_that(self) -> None:
        """Arrange the scenario before the subject is created."""

    def and_given_that_after_created(self) -> None:
        """Arrange the scenario once the subject exists."""

    @abc.abstractmethod
    def when_i_run(self) -> None:
        """Act on the subject. Runs exactly once per test."""
