from __future__ import annotations


class AppError(Exception):
    # Base class for domain errors (intended, meaningful failures).
    pass


class InvalidInputError(AppError, TypeError):
    # Raised when the schema or response map handed to the engine is absent or not a mapping.
    pass


class SchemaLoadError(AppError):
    # Raised for loader failures (unreadable file, wrong top-level shape, missing CSV columns).
    pass
