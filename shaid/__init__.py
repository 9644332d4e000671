"""shaid - turn natural language into a single shell command."""

__version__ = "0.1.0"
