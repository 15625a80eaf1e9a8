"""Base test with auto-mocking of the subject's dependencies.

`AutoMockBaseTest` builds a `MockFactory` and an `AutoMockContainer` before
each test, creates the subject through the container so that every
constructor dependency is a fake, and verifies the fakes on teardown:

* in `MockMode.LENIENT` only the expectations configured on fakes are checked;
* in `MockMode.STRICT` every fake is checked and unexpected calls fail.

Example:
    ```py
    class TestPosterLookup(AutoMockBaseTest[SimpleMovieLibrary, MediaLibrary]):
        sut_class = SimpleMovieLibrary

        def test_uses_the_poster_service(self):
            movie = self.mock_of(Movie)
            self.configure(PosterService).setup("find_poster", movie).returns("MyPoster")

            assert self.sut.poster(movie) == "MyPoster"
    ```
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any, ClassVar, Generic, TypeVar, cast

from sutkit import config
from sutkit.errors import ConfigurationError
from sutkit.lifecycle import BaseTestWithSut, ContractT
from sutkit.mocking import AutoMockContainer, Expectation, MockFactory, MockHandle, MockMode

logger = logging.getLogger(__name__)

SutT = TypeVar("SutT")
T = TypeVar("T")


class AutoMockBaseTest(BaseTestWithSut[ContractT], Generic[SutT, ContractT]):
    """Base test with auto-mocking of the subject under test.

    Attributes:
        sut_class: The concrete class the container instantiates.
        mock_mode: Mode for this class; None to use the configured default.
            A ``sutkit_mock_mode`` marker on a test overrides it.
        mock_factory: The factory tracking every fake of the current test.
        container: The container resolving the subject's dependencies.
    """

    sut_class: ClassVar[type[Any]]
    mock_mode: ClassVar[MockMode | None] = None

    mock_factory: MockFactory
    container: AutoMockContainer

    def set_up(self) -> None:
        self._build_container()
        super().set_up()

    def dispose(self) -> None:
        """Verify the fakes per the mode, then run the cleanup hooks."""
        try:
            self.mock_factory.verify_for_mode()
        finally:
            super().dispose()

    def _build_container(self) -> None:
        mode = (
            config.marker_mock_mode(self.pytest_node)
            or self.mock_mode
            or config.resolve_mock_mode(self.pytest_config)
        )
        self.mock_factory = MockFactory(mode)
        self.container = AutoMockContainer(self.mock_factory)
        logger.debug("Built %s mock container for %s", mode.value, type(self).__name__)

    # --- Mode ---

    def use_strict(self) -> None:
        """Verify every fake on teardown. Only allowed before creation."""
        self._switch_mode(MockMode.STRICT)

    def use_lenient(self) -> None:
        """Verify only configured fakes on teardown. Only allowed before creation."""
        self._switch_mode(MockMode.LENIENT)

    def _switch_mode(self, mode: MockMode) -> None:
        if self.sut_created:
            raise ConfigurationError(
                f"Cannot switch {type(self).__name__} to {mode.value} mode "
                "after the subject was created"
            )
        self.mock_factory.mode = mode

    # --- Subject ---

    def create_sut(self) -> ContractT:
        """Create the subject by asking the container for `sut_class`."""
        sut_class = getattr(type(self), "sut_class", None)
        if sut_class is None:
            raise ConfigurationError(f"{type(self).__name__} must define sut_class")
        return cast(ContractT, self.container.create(sut_class, **self.sut_overrides()))

    def sut_overrides(self) -> Mapping[str, Any]:
        """Explicit constructor arguments for the subject; none by default."""
        return {}

    @property
    def concrete_sut(self) -> SutT:
        """The subject typed as the concrete class."""
        return cast(SutT, self.sut)

    # --- Dependencies ---

    def dep(self, interface: type[T]) -> T:
        """Get a dependency out of the container."""
        return self.container.resolve(interface)

    def configure(self, interface: type[T]) -> MockHandle[T]:
        """Get the handle of a dependency to set expectations on it."""
        return self.container.handle_for(interface)

    def stub(self, interface: type[Any], member: str, /, *args: Any, **kwargs: Any) -> Expectation:
        """Set an expectation on a dependency's method."""
        return self.configure(interface).setup(member, *args, **kwargs)

    def provide(self, interface: type[T], instance: T) -> None:
        """Use a hand-written fake for ``interface`` instead of a generated one."""
        self.container.register(interface, instance)

    def mock_of(self, interface: type[Any]) -> Any:
        """Create a fake tracked, and verified, with the container's fakes."""
        return self.mock_factory.create(interface).object

    def assert_dependency_injection(
        self, interface: type[T], accessor: Callable[[ContractT], Any]
    ) -> None:
        """Assert that the subject holds the container's dependency for ``interface``.

        Raises:
            AssertionError: If ``accessor(sut)`` is not ``dep(interface)``.
        """
        expected = self.dep(interface)
        actual = accessor(self.sut)
        if actual is not expected:
            raise AssertionError(
                f"Expected the injected {interface.__name__} {expected!r}, got {actual!r}"
            )
