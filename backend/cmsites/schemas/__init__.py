"""
Pydantic schemas for request/response validation.
"""
from cmsites.schemas.common import (
    BaseSchema,
    IDSchema,
    MessageResponse,
    PaginatedResponse,
    TimestampSchema,
)
from cmsites.schemas.site import SiteCreate, SiteResponse, SiteUpdate
from cmsites.schemas.structure import (
    LayoutCreate,
    LayoutResponse,
    LayoutUpdate,
    PageCreate,
    PageResponse,
    PageUpdate,
    SnippetCreate,
    SnippetResponse,
    SnippetUpdate,
)

__all__ = [
    "BaseSchema",
    "IDSchema",
    "MessageResponse",
    "PaginatedResponse",
    "TimestampSchema",
    "SiteCreate",
    "SiteResponse",
    "SiteUpdate",
    "LayoutCreate",
    "LayoutResponse",
    "LayoutUpdate",
    "PageCreate",
    "PageResponse",
    "PageUpdate",
    "SnippetCreate",
    "SnippetResponse",
    "SnippetUpdate",
]
