"""incrcov - hierarchical and incremental coverage reports from Istanbul data."""

__version__ = "0.1.0"
