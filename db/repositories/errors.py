"""
Repository-layer exceptions for import job flows.
"""

from __future__ import annotations


class ImportJobError(Exception):
    """Base exception for import job persistence failures."""


class ImportJobNotFoundError(ImportJobError):
    """Raised when a referenced import job does not exist."""


class ImportJobStateError(ImportJobError):
    """Raised when a job transition is not allowed from its current status."""
