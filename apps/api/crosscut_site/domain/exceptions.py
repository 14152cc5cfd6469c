from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A configured directory is missing or cannot be read."""


class NoteNotFound(LookupError):
    pass
