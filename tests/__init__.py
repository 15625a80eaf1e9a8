"""SUTKIT test suite.

Folder taxonomy
- unit/         : Isolated, fast checks of a single module/class/function.
- functional/   : Whole pytest sessions driving the plugin through `pytester`.
- specs/        : Example Given/When/Then specifications of a small movie library.
- fixtures/     : The movie library domain used by the examples (no tests here).

General guidance
- Keep unit fast and deterministic; drive harness classes directly with
  `set_up()`/`dispose()` when the pytest fixtures would get in the way.
- Functional asserts outcomes of whole runs, not internals.
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
- Markers: unit, functional, spec, property
"""
