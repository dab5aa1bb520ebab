"""
Default structure created for every new site.
"""
import logging

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cmsites.core.exceptions import SeedingError
from cmsites.models.layout import Layout
from cmsites.models.page import Page
from cmsites.models.site import Site

logger = logging.getLogger(__name__)

MODULE_LAYOUT = "module"

# (label, identifier, content)
DEFAULT_LAYOUTS = [
    (
        "Module",
        MODULE_LAYOUT,
        "{{ cms:page:name:string }}\r\n",
    ),
    (
        "Lesson",
        "lesson",
        "{{ cms:page:name:string }}\r\n"
        "{{ cms:page:bottom_image:string }}\r\n"
        "{{ cms:page:time_to_complete:string }}\r\n"
        "{{ cms:page:learning_goals_summary:string }}\r\n"
        "{{ cms:page:activity_outcomes_summary:string }}",
    ),
    (
        "Activity",
        "activity",
        "{{ cms:page:title:string }}\r\n"
        "{{ cms:page:type:string }}\r\n"
        "{{ cms:page:filename:string }}\r\n"
        "{{ cms:page:size:string }}\r\n"
        "{{ cms:page:image:string }}\r\n",
    ),
]


class SiteSeeder:
    """Creates the Module/Lesson/Activity layouts and the top level module page."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def is_seeded(self, site: Site) -> bool:
        layout = await self.db.execute(
            select(Layout.id).where(Layout.site_id == site.id, Layout.identifier == MODULE_LAYOUT)
        )
        page = await self.db.execute(
            select(Page.id).where(Page.site_id == site.id, Page.parent_id.is_(None))
        )
        return layout.first() is not None or page.first() is not None

    async def create_default_layouts_and_page(self, site: Site) -> Page:
        """
        Seed ``site`` inside a savepoint; on failure nothing is left behind
        but the site itself.

        :raises SeedingError: when the default content cannot be written.
        """
        try:
            async with self.db.begin_nested():
                module_layout = None
                for position, (label, identifier, content) in enumerate(DEFAULT_LAYOUTS):
                    layout = Layout(
                        site_id=site.id,
                        label=label,
                        identifier=identifier,
                        content=content,
                        position=position,
                    )
                    self.db.add(layout)
                    if identifier == MODULE_LAYOUT:
                        module_layout = layout
                await self.db.flush()

                page = Page(
                    site_id=site.id,
                    label=site.label,
                    slug="",
                    full_path="/",
                    layout_id=module_layout.id,
                    is_published=True,
                )
                self.db.add(page)
                await self.db.flush()
        except SQLAlchemyError as exc:
            logger.error(f"Seeding site {site.identifier} failed: {exc}")
            raise SeedingError(f"Could not create default content for site {site.identifier}", site) from exc

        logger.info(f"Seeded site {site.identifier} with {len(DEFAULT_LAYOUTS)} layouts and a top level page")
        return page
