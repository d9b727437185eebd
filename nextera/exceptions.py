"""Exceptions raised for broken invariants.

Expected rule failures are returned as ``Err`` values (see
``nextera.core.result``); these exceptions mark conditions the core cannot
recover from within a single operation.
"""


class NextEraError(RuntimeError):
    """Base class for invariant violations inside the core."""


class CatalogError(NextEraError):
    """Raised when static catalog data is missing or malformed."""


class SaveFormatError(NextEraError):
    """Raised when a save envelope has an unknown version or bad shape."""


class ResultError(NextEraError):
    """Raised by ``Err.unwrap()``."""

    def __init__(self, error):
        super().__init__(str(error))
        self.error = error


class SlotNotFoundError(NextEraError):
    """Raised by a save store when a slot does not exist."""
