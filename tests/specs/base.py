"""Base specification for the movie library examples."""

from sutkit import Specification
from tests.fixtures.movie_library import MediaLibrary, SimpleMovieLibrary


class SimpleMovieLibrarySpecification(Specification[SimpleMovieLibrary, MediaLibrary]):
    """Specifications of `SimpleMovieLibrary` with auto-mocked dependencies."""

    sut_class = SimpleMovieLibrary
