"""SUTKIT

Base classes for unit and behaviour-driven tests on pytest: an ordered
setup/teardown lifecycle, automatic mocking of the subject under test's
dependencies, and Given/When/Then specifications.
"""

from sutkit.automock import AutoMockBaseTest
from sutkit.lifecycle import BaseTest, BaseTestWithSut
from sutkit.mocking import AutoMockContainer, MockFactory, MockHandle, MockMode
from sutkit.specification import Specification

__all__ = [
    "AutoMockBaseTest",
    "AutoMockContainer",
    "BaseTest",
    "BaseTestWithSut",
    "MockFactory",
    "MockHandle",
    "MockMode",
    "Specification",
    "__version__",
]
__version__ = "0.1.0"
