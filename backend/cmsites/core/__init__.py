"""
Core utilities for cmsites.
"""
from cmsites.core.exceptions import (
    BadRequestError,
    ConflictError,
    NotFoundError,
    SeedingError,
    SiteValidationError,
    SynchronizationError,
)

__all__ = [
    "BadRequestError",
    "ConflictError",
    "NotFoundError",
    "SeedingError",
    "SiteValidationError",
    "SynchronizationError",
]
