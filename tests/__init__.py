"""Record Inspector test suite."""
