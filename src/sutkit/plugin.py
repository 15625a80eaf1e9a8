"""pytest plugin for sutkit.

Registered through the ``pytest11`` entry point. It adds:

* ``--sutkit-mock-mode`` and the ``sutkit_mock_mode`` ini option, selecting
  the default mock mode of the session;
* ``--sutkit-log-level`` (``LEVEL`` or ``NAME=LEVEL``, repeatable) to show the
  harness' logs on the console through Rich;
* the ``sutkit_mock_mode`` marker, overriding the mode of one test;
* the `mock_factory` and `automock` fixtures for function-style tests, both
  verified on teardown.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from sutkit import __version__
from sutkit import config as sutkit_config
from sutkit.errors import InvalidMockModeError
from sutkit.logging import config_console_handler, log_startup, parse_log_levels
from sutkit.mocking import AutoMockContainer, MockFactory, MockMode

logger = logging.getLogger(__name__)

LOG_LEVEL_DEST = "sutkit_log_level"  # pragma: no mutate

_console_handler_key = pytest.StashKey[tuple[logging.Handler, dict[str, int]]]()


def pytest_addoption(parser: pytest.Parser) -> None:
    """Register the sutkit command line and ini options."""
    group = parser.getgroup("sutkit", "sutkit test harness")
    group.addoption(
        sutkit_config.MOCK_MODE_OPTION,
        dest=sutkit_config.MOCK_MODE_INI_KEY,
        choices=[mode.value for mode in MockMode],
        default=None,
        help="Default mock verification mode (lenient or strict).",
    )
    group.addoption(
        sutkit_config.LOG_LEVEL_OPTION,
        dest=LOG_LEVEL_DEST,
        action="append",
        default=[],
        metavar="[NAME=]LEVEL",
        help="Show harness logs on stderr. Repeatable; bare LEVEL applies to 'sutkit'.",
    )
    parser.addini(
        sutkit_config.MOCK_MODE_INI_KEY,
        help="Default mock verification mode (lenient or strict).",
        default="",
    )


def pytest_configure(config: pytest.Config) -> None:
    """Validate the mock mode and attach the console handler if requested."""
    config.addinivalue_line(
        "markers",
        f"{sutkit_config.MOCK_MODE_MARKER}(mode): verify the fakes of this test in the given mode",
    )
    try:
        mode = sutkit_config.resolve_mock_mode(config)
        levels = parse_log_levels(config.getoption(LOG_LEVEL_DEST, default=[]))
    except (InvalidMockModeError, ValueError) as exc:
        raise pytest.UsageError(str(exc)) from exc

    if not levels:
        return
    handler = config_console_handler(level=min(levels.values()))
    previous: dict[str, int] = {}
    for name, level in levels.items():
        named = logging.getLogger(name)
        previous[name] = named.level
        named.setLevel(level)
        named.addHandler(handler)
    config.stash[_console_handler_key] = (handler, previous)
    log_startup(logger, version=__version__, mock_mode=mode, logger_levels=levels)


def pytest_unconfigure(config: pytest.Config) -> None:
    """Detach the console handler and restore the levels `pytest_configure` changed."""
    if (entry := config.stash.get(_console_handler_key, None)) is None:
        return
    handler, previous = entry
    for name, level in previous.items():
        named = logging.getLogger(name)
        named.removeHandler(handler)
        named.setLevel(level)
    del config.stash[_console_handler_key]


@pytest.fixture
def mock_factory(request: pytest.FixtureRequest) -> Iterator[MockFactory]:
    """A mock factory verified on teardown.

    The mode comes from the ``sutkit_mock_mode`` marker if present, otherwise
    from the session default.
    """
    mode = sutkit_config.marker_mock_mode(request.node) or sutkit_config.resolve_mock_mode(
        request.config
    )
    factory = MockFactory(mode)
    yield factory
    factory.verify_for_mode()


@pytest.fixture
def automock(mock_factory: MockFactory) -> AutoMockContainer:  # pylint: disable=redefined-outer-name
    """An auto-mocking container whose fakes are verified on teardown."""
    return AutoMockContainer(mock_factory)
