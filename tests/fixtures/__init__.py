"""The movie library domain the examples are written against."""
