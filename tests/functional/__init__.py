"""Functional tests.

Purpose
- Validate user-visible behavior of the plugin through whole pytest sessions.

Guidelines
- Treat the plugin as a black box; assert outcomes and output, not internal state.
- Write small throwaway projects with `pytester`; one concern per test.
- Use `runpytest_subprocess` only when in-process capture gets in the way.
"""
