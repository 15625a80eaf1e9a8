"""Example Given/When/Then specifications of the movie library."""
