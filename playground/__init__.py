"""Intent-to-JSON Playground backend."""

__version__ = "0.1.0"
