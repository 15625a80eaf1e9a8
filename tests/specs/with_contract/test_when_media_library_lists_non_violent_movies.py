"""Specification when listing non violent movies."""

from sutkit.mocking.matchers import instance_of
from tests.fixtures.movie_library import Movie, MovieCritic
from tests.specs.base import SimpleMovieLibrarySpecification


class WhenMediaLibraryListsNonViolentMovies(SimpleMovieLibrarySpecification):
    """Only movies the critic does not flag are listed."""

    def given_that(self):
        """Set up the critic."""
        super().given_that()
        self.movies = [self.mock_of(Movie) for _ in range(10)]
        for movie in self.movies[:5]:
            self.configure(MovieCritic).setup("is_violent", movie).returns(True)

    def and_given_that_after_created(self):
        """Fill the library."""
        super().and_given_that_after_created()
        for movie in self.movies:
            self.sut.add(movie)

    def when_i_run(self):
        self.actual = self.sut.list_non_violent()

    def should_return_only_non_violent_movies(self):
        """The violent half is filtered out, order is kept."""
        assert self.actual == self.movies[5:]

    def should_ask_the_critic_about_every_movie(self):
        """The critic is consulted once per movie."""
        self.configure(MovieCritic).verify_times("is_violent", 10, instance_of(Movie))
