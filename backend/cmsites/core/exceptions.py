"""
Domain errors and HTTP exceptions for cmsites.
"""
import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


# ============================================================================
# Domain errors
# ============================================================================

class SiteValidationError(Exception):
    """A site failed normalization-time validation. Nothing was persisted."""

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        messages = [f"{field} {msg}" for field, msgs in errors.items() for msg in msgs]
        super().__init__("Validation failed: " + ", ".join(messages))


class SynchronizationError(Exception):
    """Propagating a structural item to the mirror partner failed."""

    def __init__(self, message: str, item=None):
        self.item = item
        super().__init__(message)


class SeedingError(Exception):
    """Default content could not be created for a site.

    The site row itself is kept; ``site`` is the record that needs a retry.
    """

    def __init__(self, message: str, site=None):
        self.site = site
        super().__init__(message)


# ============================================================================
# HTTP exceptions
# ============================================================================

class NotFoundError(HTTPException):
    """Resource not found exception."""

    def __init__(self, resource: str = "Resource"):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found"
        )


class BadRequestError(HTTPException):
    """Bad request exception."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail
        )


class ConflictError(HTTPException):
    """Conflict exception (e.g., duplicate resource)."""

    def __init__(self, detail: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail
        )


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain errors onto JSON responses."""

    @app.exception_handler(SiteValidationError)
    async def handle_site_validation(request: Request, exc: SiteValidationError):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": str(exc), "errors": exc.errors},
        )

    @app.exception_handler(SynchronizationError)
    async def handle_synchronization(request: Request, exc: SynchronizationError):
        logger.error(f"Mirror synchronization failed: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc)},
        )
