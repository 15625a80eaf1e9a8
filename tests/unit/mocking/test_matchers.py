"""Unit tests for argument matchers."""

import pytest

from sutkit.mocking.matchers import ANY, instance_of, that


def is_even(value):
    """Predicate used by the tests."""
    return value % 2 == 0


def test_that_uses_the_predicate():
    """that() compares equal to values satisfying the predicate."""
    matcher = that(is_even)
    assert matcher == 4
    assert matcher != 3


def test_that_is_named_after_the_predicate():
    """The repr names the predicate, or uses the given description."""
    assert repr(that(is_even)) == "<that is_even>"
    assert repr(that(is_even, "an even number")) == "<an even number>"


def test_instance_of():
    """instance_of() matches instances, including subclasses."""
    matcher = instance_of(int)
    assert matcher == True  # noqa: E712  # bool is an int
    assert matcher != "1"
    assert repr(matcher) == "<instance of int>"


def test_matchers_are_unhashable():
    """Matchers compare loosely, so they cannot be hashed."""
    with pytest.raises(TypeError):
        hash(that(is_even))


def test_any_matches_everything():
    """ANY is the standard library's wildcard."""
    assert ANY == object()
