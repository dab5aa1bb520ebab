"""
Page model: the page tree of a site.
"""
from sqlalchemy import Boolean, Column, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from cmsites.models.base import Base, SiteBaseModel


class Page(Base, SiteBaseModel):
    """Page node. ``full_path`` is ``/`` for a root page."""

    __tablename__ = "pages"

    parent_id = Column(
        UUID(as_uuid=True),
        ForeignKey("pages.id"),
        nullable=True,
        index=True,
    )
    layout_id = Column(
        UUID(as_uuid=True),
        ForeignKey("layouts.id", ondelete="SET NULL"),
        nullable=True,
    )
    label = Column(String(255), nullable=False)
    slug = Column(String(255), nullable=False, default="")
    full_path = Column(String(2048), nullable=False, default="/")
    position = Column(Integer, nullable=False, default=0)
    is_published = Column(Boolean, nullable=False, default=True)

    __table_args__ = (
        UniqueConstraint("site_id", "full_path", name="uq_pages_site_full_path"),
    )

    def __repr__(self) -> str:
        return f"<Page {self.full_path}>"
