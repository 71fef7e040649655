from __future__ import annotations


class ReviewError(Exception):
    """Base class for errors raised by the submission review core."""


class ValidationError(ReviewError):
    """A required attribute was missing when creating a record."""


class NotFoundError(ReviewError):
    """An explicitly addressed record does not exist."""


class PersistenceError(ReviewError):
    """The backing store rejected a read or write."""
