"""
Base model mixins for cmsites.
"""
import uuid

from sqlalchemy import Column, DateTime, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declared_attr, declarative_base

Base = declarative_base()


class UUIDMixin:
    """Mixin for UUID primary key."""

    id = Column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
    )


class TimestampMixin:
    """Mixin for created_at and updated_at timestamps."""

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


class SiteMixin:
    """Mixin for rows owned by a site.

    Owned rows are removed explicitly by ``SiteService.delete``; the foreign
    key carries no ON DELETE action.
    """

    @declared_attr
    def site_id(cls):
        return Column(
            UUID(as_uuid=True),
            ForeignKey("sites.id"),
            nullable=False,
            index=True,
        )


class BaseModel(UUIDMixin, TimestampMixin):
    """Base model with UUID and timestamps."""

    __abstract__ = True


class SiteBaseModel(BaseModel, SiteMixin):
    """Base model for site-scoped entities."""

    __abstract__ = True
