"""Mocking primitives: handles, factories, the auto-mock container and matchers."""

from .container import AutoMockContainer
from .factory import MockFactory
from .handle import Expectation, Invocation, MockHandle, Times
from .mode import MockMode

__all__ = [
    "AutoMockContainer",
    "Expectation",
    "Invocation",
    "MockFactory",
    "MockHandle",
    "MockMode",
    "Times",
]
