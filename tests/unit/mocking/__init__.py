"""Unit tests for the sutkit.mocking package."""
