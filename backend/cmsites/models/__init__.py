"""
SQLAlchemy models for cmsites.
"""
from cmsites.models.base import Base, BaseModel, SiteBaseModel
from cmsites.models.site import Site
from cmsites.models.layout import Layout
from cmsites.models.page import Page
from cmsites.models.snippet import Snippet
from cmsites.models.file import File
from cmsites.models.category import Category

__all__ = [
    "Base",
    "BaseModel",
    "SiteBaseModel",
    "Site",
    "Layout",
    "Page",
    "Snippet",
    "File",
    "Category",
]
