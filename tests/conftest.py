"""Global pytest fixtures and hooks for sutkit."""

from __future__ import annotations

from pathlib import Path

import pytest

from sutkit.config import MOCK_MODE_ENV_VAR

# pylint: disable=unused-argument

pytest_plugins = [
    "pytester",
]

TESTS_ROOT = Path(__file__).parent.resolve()

# top-level test folder -> default marker of its tests
FOLDER_MARKERS = {
    "unit": "unit",
    "specs": "spec",
    "functional": "functional",
}


def default_marker(path: Path) -> str | None:
    """Return the default marker for a test file, from its top-level folder."""
    try:
        folder = path.resolve().relative_to(TESTS_ROOT).parts[0]
    except (ValueError, IndexError):
        return None
    return FOLDER_MARKERS.get(folder)


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark every item with its folder's marker unless it already carries it."""
    for item in items:
        if (name := default_marker(item.path)) is None:
            continue
        if item.get_closest_marker(name) is None:
            item.add_marker(getattr(pytest.mark, name))


@pytest.fixture
def clean_mode_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    """Remove `SUTKIT_MOCK_MODE` from the environment for the test.

    Returns the monkeypatch so tests can set the variable again.
    """
    monkeypatch.delenv(MOCK_MODE_ENV_VAR, raising=False)
    return monkeypatch
