"""
Uploaded file metadata owned by a site.
"""
from sqlalchemy import Column, Integer, String

from cmsites.models.base import Base, SiteBaseModel


class File(Base, SiteBaseModel):
    __tablename__ = "files"

    label = Column(String(255), nullable=False)
    file_name = Column(String(255), nullable=False)
    content_type = Column(String(255), nullable=True)
    file_size = Column(Integer, nullable=True)
