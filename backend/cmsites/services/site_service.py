"""
Site lifecycle: create, update, delete and re-seed.

Each mutation runs an explicit pipeline:

* create: normalize -> validate -> persist -> seed -> synchronize (if mirrored)
* update: normalize -> validate -> persist -> synchronize (if the mirror flag
  was just switched on)
* delete: un-mirror -> delete owned rows -> delete the site
"""
import logging
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cmsites.core.exceptions import SeedingError
from cmsites.models.category import Category
from cmsites.models.file import File
from cmsites.models.layout import Layout
from cmsites.models.page import Page
from cmsites.models.site import Site
from cmsites.models.snippet import Snippet
from cmsites.schemas.site import SiteCreate, SiteUpdate
from cmsites.services.mirror_service import MirrorLocks, MirrorSynchronizer
from cmsites.services.seeder import SiteSeeder
from cmsites.services.site_rules import normalize_site, validate_site

logger = logging.getLogger(__name__)

# Children before parents: pages reference layouts
OWNED_MODELS = (Category, File, Snippet, Page, Layout)


class SiteService:
    """Service for site operations."""

    def __init__(self, db: AsyncSession, locks: MirrorLocks | None = None):
        self.db = db
        self.seeder = SiteSeeder(db)
        self.synchronizer = MirrorSynchronizer(db, locks)

    async def get_by_id(self, site_id: UUID) -> Site | None:
        """Get site by ID."""
        result = await self.db.execute(select(Site).where(Site.id == site_id))
        return result.scalar_one_or_none()

    async def list_sites(
        self,
        page: int = 1,
        per_page: int = 20,
        search: str | None = None,
    ) -> tuple[list[Site], int]:
        """List sites with pagination."""
        query = select(Site)
        count_query = select(func.count(Site.id))

        if search:
            search_filter = Site.label.ilike(f"%{search}%") | Site.hostname.ilike(f"%{search}%")
            query = query.where(search_filter)
            count_query = count_query.where(search_filter)

        total_result = await self.db.execute(count_query)
        total = total_result.scalar()

        query = query.order_by(Site.hostname, Site.path)
        query = query.offset((page - 1) * per_page).limit(per_page)
        result = await self.db.execute(query)
        sites = result.scalars().all()

        return list(sites), total

    async def create(self, data: SiteCreate) -> Site:
        """
        Create a new site with its default content.

        :raises SiteValidationError: nothing was written.
        :raises SeedingError: the site row exists but has no default content.
        :raises SynchronizationError: mirroring onto the partner failed.
        """
        site = Site(**data.model_dump())
        normalize_site(site)
        await validate_site(self.db, site)

        self.db.add(site)
        await self.db.flush()
        await self.db.refresh(site)
        logger.info(f"Created site {site.identifier} ({site.hostname}/{site.path})")

        await self.seeder.create_default_layouts_and_page(site)

        if site.is_mirrored:
            await self.synchronizer.synchronize(site)
        return site

    async def update(self, site_id: UUID, data: SiteUpdate) -> Site | None:
        """Update a site; returns ``None`` when it does not exist."""
        site = await self.get_by_id(site_id)
        if not site:
            return None

        was_mirrored = bool(site.is_mirrored)

        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("is_mirrored") is None:
            update_data.pop("is_mirrored", None)
        for field, value in update_data.items():
            setattr(site, field, value)

        normalize_site(site)
        await validate_site(self.db, site)

        await self.db.flush()
        await self.db.refresh(site)

        if site.is_mirrored and not was_mirrored:
            await self.synchronizer.synchronize(site)
        return site

    async def delete(self, site_id: UUID) -> bool:
        """Delete a site and everything it owns. The mirror partner is left untouched."""
        site = await self.get_by_id(site_id)
        if not site:
            return False

        if site.is_mirrored:
            site.is_mirrored = False
            await self.db.flush()

        for model in OWNED_MODELS:
            await self.db.execute(delete(model).where(model.site_id == site.id))

        await self.db.delete(site)
        await self.db.flush()
        logger.info(f"Deleted site {site.identifier}")
        return True

    async def seed(self, site_id: UUID) -> Site | None:
        """
        Create default content for a site whose seeding failed earlier.

        A mirrored site missed its synchronization at creation; it runs here.
        """
        site = await self.get_by_id(site_id)
        if not site:
            return None

        if await self.seeder.is_seeded(site):
            raise SeedingError(f"Site {site.identifier} already has default content", site)

        await self.seeder.create_default_layouts_and_page(site)
        if site.is_mirrored:
            await self.synchronizer.synchronize(site)
        return site
