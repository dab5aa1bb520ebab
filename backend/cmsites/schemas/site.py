"""
Site schemas.
"""
from pydantic import Field

from cmsites.models.site import Site
from cmsites.schemas.common import BaseSchema, IDSchema, TimestampSchema


class SiteCreate(BaseSchema):
    """Create site request. Blank identifier, hostname and label are derived."""

    identifier: str | None = Field(default=None, max_length=255)
    label: str | None = Field(default=None, max_length=255)
    hostname: str | None = Field(default=None, max_length=255)
    path: str | None = Field(default=None, max_length=255)
    is_mirrored: bool = False


class SiteUpdate(BaseSchema):
    """Update site request."""

    label: str | None = Field(default=None, max_length=255)
    hostname: str | None = Field(default=None, max_length=255)
    path: str | None = Field(default=None, max_length=255)
    is_mirrored: bool | None = None


class SiteResponse(IDSchema, TimestampSchema):
    """Site response."""

    identifier: str
    label: str
    hostname: str
    path: str
    is_mirrored: bool
    url: str | None = None

    @classmethod
    def from_site(cls, site: Site, public_cms_path: str = "/") -> "SiteResponse":
        # Site.url is a method, so the row is read column by column
        data = {column.name: getattr(site, column.name) for column in site.__table__.columns}
        return cls.model_validate({**data, "url": site.url(public_cms_path)})
