"""
Snippet model: reusable content blocks, a flat collection per site.
"""
from sqlalchemy import Column, Integer, String, Text, UniqueConstraint

from cmsites.models.base import Base, SiteBaseModel


class Snippet(Base, SiteBaseModel):
    __tablename__ = "snippets"

    identifier = Column(String(255), nullable=False)
    label = Column(String(255), nullable=False)
    content = Column(Text, nullable=True)
    position = Column(Integer, nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("site_id", "identifier", name="uq_snippets_site_identifier"),
    )

    def __repr__(self) -> str:
        return f"<Snippet {self.identifier}>"
