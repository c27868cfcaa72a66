"""
Error taxonomy for the productivity tracker

- ValidationError: bad input, rejected before any mutation is written
- NotFoundError: entry, log or analysis that does not exist
- DataError: not enough tracked data to run an analysis
"""


class ProductivityError(Exception):
    """Base class for all expected, caller-facing failures"""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.kind, "message": self.message}


class ValidationError(ProductivityError, ValueError):
    kind = "validation_error"


class NotFoundError(ProductivityError, LookupError):
    kind = "not_found"


class DataError(ProductivityError):
    kind = "data_error"
