"""Conventional commit validation for CI pipelines."""

__version__ = "0.1.0"
