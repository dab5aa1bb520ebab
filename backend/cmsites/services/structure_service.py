"""
Layout, page and snippet services.

Every write on a mirrored site is pushed to the partner site; deletes
remove the partner's counterpart first.
"""
import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from cmsites.core.exceptions import BadRequestError, ConflictError, NotFoundError
from cmsites.models.layout import Layout
from cmsites.models.page import Page
from cmsites.models.site import Site
from cmsites.models.snippet import Snippet
from cmsites.schemas.structure import (
    LayoutCreate,
    LayoutUpdate,
    PageCreate,
    PageUpdate,
    SnippetCreate,
    SnippetUpdate,
)
from cmsites.services.mirror_service import StructureMirror, mirror_key
from cmsites.services.tree import descendants, flatten, page_full_path, roots

logger = logging.getLogger(__name__)


class StructureService:
    """Shared plumbing for the site-scoped structural collections."""

    model = None
    resource = "Item"
    hierarchical = False
    nullable: tuple[str, ...] = ()

    def __init__(self, db: AsyncSession):
        self.db = db
        self.mirror = StructureMirror(db)

    async def list(self, site: Site) -> list:
        """All items of ``site``; trees come roots first, parents before children."""
        items = await self.mirror.load(self.model, site)
        return flatten(items) if self.hierarchical else items

    async def roots(self, site: Site) -> list:
        return roots(await self.mirror.load(self.model, site))

    async def descendants(self, site: Site, item) -> list:
        return descendants(item, await self.mirror.load(self.model, site))

    async def get(self, site: Site, item_id: UUID):
        result = await self.db.execute(
            select(self.model).where(self.model.id == item_id, self.model.site_id == site.id)
        )
        return result.scalar_one_or_none()

    async def get_or_404(self, site: Site, item_id: UUID):
        item = await self.get(site, item_id)
        if item is None:
            raise NotFoundError(self.resource)
        return item

    def _changes(self, data) -> dict:
        """Fields set on an update request; a null only clears nullable columns."""
        return {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field in self.nullable
        }

    async def _propagate(self, site: Site, item, previous_key: str | None = None) -> None:
        partner = await self.mirror.partner_for(site)
        if partner is not None:
            await self.mirror.sync_mirror(item, partner, previous_key)

    async def _save(self, site: Site, item, previous_key: str | None = None):
        await self.db.flush()
        await self._propagate(site, item, previous_key)
        await self.db.refresh(item)
        return item

    async def _ensure_unique(self, site: Site, column, value, exclude_id: UUID | None = None) -> None:
        query = select(self.model.id).where(self.model.site_id == site.id, column == value)
        if exclude_id is not None:
            query = query.where(self.model.id != exclude_id)
        if (await self.db.execute(query)).first() is not None:
            raise ConflictError(f"{self.resource} '{value}' already exists")

    async def _ensure_parent(self, site: Site, item, parent_id: UUID | None) -> None:
        if parent_id is None:
            return
        parent = await self.get(site, parent_id)
        if parent is None:
            raise NotFoundError(f"Parent {self.resource.lower()}")
        if item is not None:
            subtree = [item] + await self.descendants(site, item)
            if parent.id in {node.id for node in subtree}:
                raise BadRequestError(f"{self.resource} cannot be moved below itself")

    async def delete(self, site: Site, item_id: UUID) -> bool:
        """Delete an item (and its subtree) here and on the mirror partner."""
        item = await self.get(site, item_id)
        if item is None:
            return False

        await self.mirror.destroy_mirror(item, site)

        doomed = [item]
        if self.hierarchical:
            doomed.extend(await self.descendants(site, item))
        await self.db.execute(
            delete(self.model).where(self.model.id.in_([row.id for row in doomed]))
        )
        await self.db.flush()
        logger.info(f"Deleted {len(doomed)} {self.model.__tablename__} from site {site.identifier}")
        return True


class LayoutService(StructureService):
    model = Layout
    resource = "Layout"
    hierarchical = True
    nullable = ("parent_id", "content")

    async def create(self, site: Site, data: LayoutCreate) -> Layout:
        await self._ensure_unique(site, Layout.identifier, data.identifier)
        await self._ensure_parent(site, None, data.parent_id)

        layout = Layout(site_id=site.id, **data.model_dump())
        self.db.add(layout)
        return await self._save(site, layout)

    async def update(self, site: Site, layout_id: UUID, data: LayoutUpdate) -> Layout:
        layout = await self.get_or_404(site, layout_id)
        previous_key = mirror_key(layout)

        update_data = self._changes(data)
        if "identifier" in update_data:
            await self._ensure_unique(site, Layout.identifier, update_data["identifier"], layout.id)
        if "parent_id" in update_data:
            await self._ensure_parent(site, layout, update_data["parent_id"])

        for field, value in update_data.items():
            setattr(layout, field, value)
        return await self._save(site, layout, previous_key)


class PageService(StructureService):
    model = Page
    resource = "Page"
    hierarchical = True
    nullable = ("parent_id", "layout_id")

    async def _ensure_layout(self, site: Site, layout_id: UUID | None) -> None:
        if layout_id is None:
            return
        result = await self.db.execute(
            select(Layout.id).where(Layout.id == layout_id, Layout.site_id == site.id)
        )
        if result.first() is None:
            raise NotFoundError("Layout")

    async def _full_path(self, site: Site, parent_id: UUID | None, slug: str) -> str:
        if parent_id is None:
            return page_full_path(None, slug)
        if not slug:
            raise BadRequestError("Slug is required for pages below the root page")
        parent = await self.get(site, parent_id)
        return page_full_path(parent.full_path, slug)

    async def create(self, site: Site, data: PageCreate) -> Page:
        await self._ensure_parent(site, None, data.parent_id)
        await self._ensure_layout(site, data.layout_id)

        full_path = await self._full_path(site, data.parent_id, data.slug)
        await self._ensure_unique(site, Page.full_path, full_path)

        page = Page(site_id=site.id, full_path=full_path, **data.model_dump())
        self.db.add(page)
        return await self._save(site, page)

    async def update(self, site: Site, page_id: UUID, data: PageUpdate) -> Page:
        page = await self.get_or_404(site, page_id)

        update_data = self._changes(data)
        if "parent_id" in update_data:
            await self._ensure_parent(site, page, update_data["parent_id"])
        if "layout_id" in update_data:
            await self._ensure_layout(site, update_data["layout_id"])

        subtree = [page] + await self.descendants(site, page)
        previous_paths = {node.id: node.full_path for node in subtree}

        for field, value in update_data.items():
            setattr(page, field, value)

        if "slug" in update_data or "parent_id" in update_data:
            full_path = await self._full_path(site, page.parent_id, page.slug)
            await self._ensure_unique(site, Page.full_path, full_path, page.id)
            page.full_path = full_path
            paths = {page.id: full_path}
            for node in subtree[1:]:
                node.full_path = page_full_path(paths[node.parent_id], node.slug)
                paths[node.id] = node.full_path

        await self.db.flush()
        # Parents go first so every child finds its mirrored parent
        for node in subtree:
            if node is page or node.full_path != previous_paths[node.id]:
                await self._propagate(site, node, previous_paths[node.id])
        await self.db.refresh(page)
        return page


class SnippetService(StructureService):
    model = Snippet
    resource = "Snippet"
    nullable = ("content",)

    async def create(self, site: Site, data: SnippetCreate) -> Snippet:
        await self._ensure_unique(site, Snippet.identifier, data.identifier)

        snippet = Snippet(site_id=site.id, **data.model_dump())
        self.db.add(snippet)
        return await self._save(site, snippet)

    async def update(self, site: Site, snippet_id: UUID, data: SnippetUpdate) -> Snippet:
        snippet = await self.get_or_404(site, snippet_id)
        previous_key = mirror_key(snippet)

        update_data = self._changes(data)
        if "identifier" in update_data:
            await self._ensure_unique(site, Snippet.identifier, update_data["identifier"], snippet.id)

        for field, value in update_data.items():
            setattr(snippet, field, value)
        return await self._save(site, snippet, previous_key)
