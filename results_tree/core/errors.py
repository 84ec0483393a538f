from __future__ import annotations


class ResultsTreeError(Exception):
    """Base class for errors raised by the results tree."""


class InvalidCategory(ResultsTreeError, ValueError):
    """A category outside the real set (e.g. the ``NONE`` sentinel) was used."""

    def __init__(self, category: object):
        super().__init__(f"Invalid category: {category!r}")
        self.category = category


class IOFailure(ResultsTreeError, OSError):
    """The output sink rejected a write during export."""


class UnknownApplication(ResultsTreeError, LookupError):
    """No application handler is registered under the requested selector."""
