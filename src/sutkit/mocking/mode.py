"""Verification modes for mock factories."""

from enum import Enum

from sutkit.errors import InvalidMockModeError


class MockMode(Enum):
    """How strictly mocks are verified at teardown.

    * ``LENIENT``: only mocks with configured expectations are checked.
    * ``STRICT``: every mock is checked and unexpected calls fail.
    """

    LENIENT = "lenient"
    STRICT = "strict"

    @classmethod
    def parse(cls, value: "str | MockMode") -> "MockMode":
        """Parse a mode from its name, case-insensitively.

        Raises:
            InvalidMockModeError: If the value is not a known mode.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as exc:
            raise InvalidMockModeError(str(value)) from exc
