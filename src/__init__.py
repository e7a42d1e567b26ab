"""qbit — cross-platform package install and script runner."""

__version__ = "0.1.0"
