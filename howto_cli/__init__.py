"""
CLI tool for turning a plain-language action into a shell command using the OpenAI API.

This package provides the `howto` command. Describe what you want to do and it prints
a single shell command that does it, ready to be copied or piped to `sh`.
"""

__version__ = "0.1.0"


class HowtoError(Exception):
    """Base class for errors that are reported to the user without a traceback."""
