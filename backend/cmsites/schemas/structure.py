"""
Layout, page and snippet schemas.
"""
from uuid import UUID

from pydantic import Field

from cmsites.schemas.common import BaseSchema, IDSchema, TimestampSchema


class LayoutCreate(BaseSchema):
    """Create layout request."""

    identifier: str = Field(min_length=1, max_length=255, pattern=r"(?i)^\w[a-z0-9_-]*$")
    label: str = Field(min_length=1, max_length=255)
    content: str | None = None
    parent_id: UUID | None = None
    position: int = 0


class LayoutUpdate(BaseSchema):
    """Update layout request."""

    identifier: str | None = Field(default=None, min_length=1, max_length=255, pattern=r"(?i)^\w[a-z0-9_-]*$")
    label: str | None = None
    content: str | None = None
    parent_id: UUID | None = None
    position: int | None = None


class LayoutResponse(IDSchema, TimestampSchema):
    """Layout response."""

    site_id: UUID
    parent_id: UUID | None
    identifier: str
    label: str
    content: str | None
    position: int


class PageCreate(BaseSchema):
    """Create page request. Omit ``parent_id`` for the root page."""

    label: str = Field(min_length=1, max_length=255)
    slug: str = Field(default="", max_length=255, pattern=r"^[^/?#\s]*$")
    parent_id: UUID | None = None
    layout_id: UUID | None = None
    position: int = 0
    is_published: bool = True


class PageUpdate(BaseSchema):
    """Update page request."""

    label: str | None = None
    slug: str | None = Field(default=None, max_length=255, pattern=r"^[^/?#\s]*$")
    parent_id: UUID | None = None
    layout_id: UUID | None = None
    position: int | None = None
    is_published: bool | None = None


class PageResponse(IDSchema, TimestampSchema):
    """Page response."""

    site_id: UUID
    parent_id: UUID | None
    layout_id: UUID | None
    label: str
    slug: str
    full_path: str
    position: int
    is_published: bool


class SnippetCreate(BaseSchema):
    """Create snippet request."""

    identifier: str = Field(min_length=1, max_length=255, pattern=r"(?i)^\w[a-z0-9_-]*$")
    label: str = Field(min_length=1, max_length=255)
    content: str | None = None
    position: int = 0


class SnippetUpdate(BaseSchema):
    """Update snippet request."""

    identifier: str | None = Field(default=None, min_length=1, max_length=255, pattern=r"(?i)^\w[a-z0-9_-]*$")
    label: str | None = None
    content: str | None = None
    position: int | None = None


class SnippetResponse(IDSchema, TimestampSchema):
    """Snippet response."""

    site_id: UUID
    identifier: str
    label: str
    content: str | None
    position: int
