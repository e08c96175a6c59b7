"""stayboard: local-storage backed task manager and rental marketplace state layer."""

__version__ = "0.1.0"
