"""Specifications written against the `MediaLibrary` contract."""
