"""Configuration utilities for sutkit.

This module centralizes the constants and helpers used to pick the mock mode
of a test. The first value found wins:

1. the ``sutkit_mock_mode`` marker on the test (see `marker_mock_mode`),
2. the ``mock_mode`` attribute of an `AutoMockBaseTest` class,
3. the ``--sutkit-mock-mode`` pytest command line option,
4. the ``sutkit_mock_mode`` pytest ini option,
5. the ``SUTKIT_MOCK_MODE`` environment variable,
6. `MockMode.LENIENT`.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from sutkit.errors import ConfigurationError
from sutkit.mocking.mode import MockMode

if TYPE_CHECKING:
    import pytest

MOCK_MODE_ENV_VAR = "SUTKIT_MOCK_MODE"  # pragma: no mutate
MOCK_MODE_OPTION = "--sutkit-mock-mode"  # pragma: no mutate
MOCK_MODE_INI_KEY = "sutkit_mock_mode"  # pragma: no mutate
MOCK_MODE_MARKER = "sutkit_mock_mode"  # pragma: no mutate
LOG_LEVEL_OPTION = "--sutkit-log-level"  # pragma: no mutate
DEFAULT_MOCK_MODE = MockMode.LENIENT


def get_default_mock_mode() -> MockMode:
    """Get the default mock mode from the environment.

    Returns:
        The mode named by `SUTKIT_MOCK_MODE`, or `MockMode.LENIENT` when the
        variable is unset or empty.

    Raises:
        InvalidMockModeError: If `SUTKIT_MOCK_MODE` names an unknown mode.
    """
    if not (value := os.environ.get(MOCK_MODE_ENV_VAR)):
        return DEFAULT_MOCK_MODE
    return MockMode.parse(value)


def resolve_mock_mode(pytest_config: pytest.Config | None = None) -> MockMode:
    """Resolve the default mock mode for a test session.

    Args:
        pytest_config: The active pytest config, or None outside of pytest.
            Works whether or not the sutkit plugin registered its options.

    Raises:
        InvalidMockModeError: If the selected value names an unknown mode.
    """
    if pytest_config is not None:
        if value := pytest_config.getoption(MOCK_MODE_INI_KEY, default=None):
            return MockMode.parse(value)
        try:
            value = pytest_config.getini(MOCK_MODE_INI_KEY)
        except ValueError:  # ini option not registered
            value = None
        if value:
            return MockMode.parse(value)
    return get_default_mock_mode()


def marker_mock_mode(node: pytest.Item | None) -> MockMode | None:
    """Read the mode of the closest ``sutkit_mock_mode`` marker of ``node``.

    The mode is given positionally, ``@pytest.mark.sutkit_mock_mode("strict")``,
    or as ``mode="strict"``.

    Returns:
        The marked mode, or None when ``node`` is None or carries no marker.

    Raises:
        ConfigurationError: If the marker names no mode.
        InvalidMockModeError: If the marker names an unknown mode.
    """
    if node is None or (marker := node.get_closest_marker(MOCK_MODE_MARKER)) is None:
        return None
    value = marker.args[0] if marker.args else marker.kwargs.get("mode")
    if value is None:
        raise ConfigurationError(
            f"@pytest.mark.{MOCK_MODE_MARKER} needs a mode, e.g. "
            f"@pytest.mark.{MOCK_MODE_MARKER}('strict')"
        )
    return MockMode.parse(value)
