"""
Layout model: the template tree pages are rendered with.
"""
from sqlalchemy import Column, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID

from cmsites.models.base import Base, SiteBaseModel


class Layout(Base, SiteBaseModel):
    """Layout node. Children inherit from their parent layout."""

    __tablename__ = "layouts"

    parent_id = Column(
        UUID(as_uuid=True),
        ForeignKey("layouts.id"),
        nullable=True,
        index=True,
    )
    identifier = Column(String(255), nullable=False)
    label = Column(String(255), nullable=False)
    content = Column(Text, nullable=True)
    position = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("site_id", "identifier", name="uq_layouts_site_identifier"),
    )

    def __repr__(self) -> str:
        return f"<Layout {self.identifier}>"
