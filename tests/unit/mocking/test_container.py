"""Unit tests for the auto-mocking container."""

from __future__ import annotations

import pytest

from sutkit.errors import ConfigurationError, UnresolvableDependencyError
from sutkit.mocking import AutoMockContainer, MockFactory
from tests.fixtures.movie_library import (
    MovieCritic,
    NamedMovieLibrary,
    PosterService,
    SimpleMovieLibrary,
)

# pylint: disable=redefined-outer-name, too-few-public-methods, unused-argument

# ============================================================================
#                               Subjects
# ============================================================================


class NoConstructor:
    """Uses object.__init__."""


class WithDefaults:
    """A builtin-typed parameter with a default is left alone."""

    def __init__(self, critic: MovieCritic, retries: int = 3) -> None:
        self.critic = critic
        self.retries = retries


class WithVarArgs:
    """*args and **kwargs are not filled."""

    def __init__(self, critic: MovieCritic, *args: object, **kwargs: object) -> None:
        self.critic = critic
        self.args = args
        self.kwargs = kwargs


class PositionalOnly:
    """Positional-only parameters cannot be passed by name."""

    def __init__(self, critic: MovieCritic, /) -> None:
        self.critic = critic


class BadAnnotation:
    """An annotation that does not resolve."""

    def __init__(self, critic: UndefinedCritic) -> None:  # type: ignore[name-defined] # noqa: F821
        self.critic = critic


class Unannotated:
    """A parameter without annotation or default."""

    def __init__(self, critic) -> None:
        self.critic = critic


@pytest.fixture
def factory() -> MockFactory:
    """A lenient factory."""
    return MockFactory()


@pytest.fixture
def container(factory) -> AutoMockContainer:
    """A container over `factory`."""
    return AutoMockContainer(factory)


# ============================================================================
#                               Resolution
# ============================================================================


class TestResolve:
    """Looking up fakes."""

    @staticmethod
    def test_resolve_is_identity_stable(container):
        """The same interface resolves to the same fake."""
        assert container.resolve(PosterService) is container.resolve(PosterService)

    @staticmethod
    def test_resolve_creates_through_the_factory(container, factory):
        """Resolved fakes are tracked by the factory."""
        critic = container.resolve(MovieCritic)
        assert [handle.object for handle in factory.handles] == [critic]

    @staticmethod
    def test_handle_for_is_the_handle_of_the_resolved_fake(container):
        """handle_for and resolve agree."""
        assert container.handle_for(PosterService).object is container.resolve(PosterService)

    @staticmethod
    def test_contains(container):
        """Only resolved or registered interfaces are in the container."""
        assert PosterService not in container
        container.resolve(PosterService)
        assert PosterService in container

    @staticmethod
    def test_containers_are_isolated(factory):
        """Two containers never share fakes."""
        first = AutoMockContainer(factory)
        second = AutoMockContainer(factory)
        assert first.resolve(MovieCritic) is not second.resolve(MovieCritic)


class TestRegister:
    """Explicit fakes."""

    @staticmethod
    def test_registered_instance_is_resolved(container):
        """register() takes the place of a generated fake."""
        critic = object()
        container.register(MovieCritic, critic)

        assert container.resolve(MovieCritic) is critic
        assert MovieCritic in container

    @staticmethod
    def test_registered_instance_has_no_handle(container):
        """Explicit fakes cannot be configured."""
        container.register(MovieCritic, object())
        with pytest.raises(ConfigurationError, match="explicitly registered"):
            container.handle_for(MovieCritic)

    @staticmethod
    def test_register_after_resolve_raises(container):
        """Replacing a fake already handed out is refused."""
        container.resolve(MovieCritic)
        with pytest.raises(ConfigurationError, match="already resolved"):
            container.register(MovieCritic, object())


# ============================================================================
#                               Creation
# ============================================================================


class TestCreate:
    """Building subjects."""

    @staticmethod
    def test_create_injects_fakes(container):
        """Each annotated parameter receives the interface's fake."""
        library = container.create(SimpleMovieLibrary)

        assert library.poster_service is container.resolve(PosterService)
        assert library.critic is container.resolve(MovieCritic)

    @staticmethod
    def test_optional_dependencies_are_mocked(container):
        """``X | None`` parameters receive the fake of X."""
        library = container.create(NamedMovieLibrary, name="Mine")

        assert library.name == "Mine"
        assert library.critic is container.resolve(MovieCritic)

    @staticmethod
    def test_overrides_take_precedence(container):
        """Explicit values replace fakes."""
        critic = object()
        library = container.create(SimpleMovieLibrary, critic=critic)

        assert library.critic is critic
        assert MovieCritic not in container

    @staticmethod
    def test_builtin_parameter_with_default_is_left_to_its_default(container):
        """Defaults are used for parameters that cannot be mocked."""
        subject = container.create(WithDefaults)
        assert subject.retries == 3

    @staticmethod
    def test_var_args_are_skipped(container):
        """*args and **kwargs stay empty."""
        subject = container.create(WithVarArgs)
        assert (subject.args, subject.kwargs) == ((), {})

    @staticmethod
    def test_class_without_constructor(container):
        """Classes using object.__init__ need no dependencies."""
        assert isinstance(container.create(NoConstructor), NoConstructor)


class TestCreateErrors:
    """Subjects the container cannot build."""

    @staticmethod
    def test_builtin_parameter_without_default(container):
        """Builtins cannot be mocked and need an override."""
        with pytest.raises(
            UnresolvableDependencyError,
            match="Cannot resolve parameter 'name' of NamedMovieLibrary",
        ):
            container.create(NamedMovieLibrary)

    @staticmethod
    def test_unannotated_parameter(container):
        """Without annotation there is nothing to mock."""
        with pytest.raises(UnresolvableDependencyError, match="no mockable annotation"):
            container.create(Unannotated)

    @staticmethod
    def test_positional_only_parameter(container):
        """Positional-only parameters are refused."""
        with pytest.raises(UnresolvableDependencyError, match="positional-only"):
            container.create(PositionalOnly)

    @staticmethod
    def test_unresolvable_annotation(container):
        """Annotations that do not resolve are reported."""
        with pytest.raises(UnresolvableDependencyError, match="bad annotations"):
            container.create(BadAnnotation)

    @staticmethod
    def test_unknown_override(container):
        """Overrides must name constructor parameters."""
        with pytest.raises(UnresolvableDependencyError, match="not a constructor parameter"):
            container.create(SimpleMovieLibrary, colour="red")

    @staticmethod
    def test_error_attributes(container):
        """The error names the class and the parameter."""
        with pytest.raises(UnresolvableDependencyError) as excinfo:
            container.create(NamedMovieLibrary)
        assert excinfo.value.owner is NamedMovieLibrary
        assert excinfo.value.parameter == "name"
