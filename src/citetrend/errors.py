"""
Exceptions raised by citetrend.
"""

from __future__ import annotations


class CitetrendError(Exception):
    """Base class for all citetrend errors."""


class NetworkError(CitetrendError):
    """The search request did not complete or returned an error status."""


class DecodeError(CitetrendError):
    """The response body is not a search page we understand."""


class ExportError(CitetrendError):
    """There is nothing to rasterise."""


class SearchInProgressError(CitetrendError):
    """A search was started while another one is still running."""


class SearchCancelled(CitetrendError):
    """The active search was cancelled before it finished."""
