"""
Category owned by a site.
"""
from sqlalchemy import Column, String

from cmsites.models.base import Base, SiteBaseModel


class Category(Base, SiteBaseModel):
    __tablename__ = "categories"

    label = Column(String(255), nullable=False)
    categorized_type = Column(String(64), nullable=False)
