"""Unit tests, one module per sutkit module.

Harness classes are driven two ways: directly through `set_up()` and
`dispose()` when a test needs to watch failures propagate, and by pytest
itself for the classes named `Test*`/`When*`. Neither way touches the disk,
the network or the clock.
"""
