"""
Site model: one tenant's hostname/path and the content tree served there.
"""
from sqlalchemy import Boolean, Column, String, UniqueConstraint

from cmsites.models.base import Base, BaseModel
from cmsites.utils.text import squeeze


class Site(Base, BaseModel):
    """A logical site served from the shared content store."""

    __tablename__ = "sites"

    identifier = Column(String(255), nullable=False, unique=True, index=True)
    label = Column(String(255), nullable=False)
    hostname = Column(String(255), nullable=False, index=True)
    path = Column(String(255), nullable=False, default="")
    is_mirrored = Column(Boolean, nullable=False, default=False, index=True)

    __table_args__ = (
        UniqueConstraint("hostname", "path", name="uq_sites_hostname_path"),
    )

    def url(self, public_cms_path: str = "/") -> str:
        """Scheme-relative URL of the site root, e.g. ``//example.com/cms/blog``."""
        parts = [self.hostname or "", public_cms_path or "/", self.path or ""]
        return "//" + squeeze("/".join(parts), "/")

    def __repr__(self) -> str:
        return f"<Site {self.identifier} ({self.hostname}/{self.path})>"
