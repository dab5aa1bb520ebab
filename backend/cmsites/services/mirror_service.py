"""
Mirroring of site structure (layouts, pages, snippets) between the two
mirrored sites.

``StructureMirror`` reconciles single items with their counterpart on the
partner site. ``MirrorSynchronizer`` walks a whole mirrored pair when a site
becomes mirrored. Counterparts are matched by identifier for layouts and
snippets, and by full path for pages. Structure is mirrored; per-site data
such as the label of a non-root page stays with its site.
"""
import asyncio
import logging
import weakref
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cmsites.core.exceptions import SynchronizationError
from cmsites.models.layout import Layout
from cmsites.models.page import Page
from cmsites.models.site import Site
from cmsites.models.snippet import Snippet
from cmsites.services.tree import descendants, flatten

logger = logging.getLogger(__name__)


class MirrorLocks:
    """
    One ``asyncio.Lock`` per unordered pair of mirrored sites.

    Locks are held weakly: a lock nobody holds or waits on is dropped.
    """

    def __init__(self):
        self._locks: weakref.WeakValueDictionary[frozenset, asyncio.Lock] = (
            weakref.WeakValueDictionary()
        )

    def for_pair(self, site_id: UUID, partner_id: UUID) -> asyncio.Lock:
        key = frozenset((site_id, partner_id))
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    def __len__(self) -> int:
        return len(self._locks)


mirror_locks = MirrorLocks()


def mirror_key(item) -> str:
    """The value a counterpart is matched on."""
    if isinstance(item, Page):
        return item.full_path
    return item.identifier


class StructureMirror:
    """Item level mirroring onto the partner site."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def partner_for(self, site: Site) -> Site | None:
        """First other mirrored site, or ``None`` when ``site`` is not mirrored."""
        if not site.is_mirrored:
            return None
        result = await self.db.execute(
            select(Site)
            .where(Site.is_mirrored.is_(True), Site.id != site.id)
            .order_by(Site.created_at, Site.identifier)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def load(self, model, site: Site) -> list:
        """Fresh rows of ``model`` for ``site``, bypassing stale identity map state."""
        result = await self.db.execute(
            select(model)
            .where(model.site_id == site.id)
            .order_by(model.position, model.created_at)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())

    async def _find(self, model, site: Site, key: str | None):
        if key is None:
            return None
        column = model.full_path if model is Page else model.identifier
        result = await self.db.execute(
            select(model).where(model.site_id == site.id, column == key)
        )
        return result.scalar_one_or_none()

    async def _counterpart(self, item, target: Site, previous_key: str | None):
        mirror = None
        if previous_key is not None:
            mirror = await self._find(type(item), target, previous_key)
        if mirror is None:
            mirror = await self._find(type(item), target, mirror_key(item))
        return mirror

    async def sync_mirror(self, item, target: Site, previous_key: str | None = None):
        """
        Create or update the counterpart of ``item`` on ``target``.

        ``previous_key`` is the identifier (or full path) the item had before
        an update, so a renamed item updates its existing counterpart.

        :raises SynchronizationError: when the counterpart cannot be written.
        """
        try:
            if isinstance(item, Layout):
                mirror = await self._sync_layout(item, target, previous_key)
            elif isinstance(item, Page):
                mirror = await self._sync_page(item, target, previous_key)
            elif isinstance(item, Snippet):
                mirror = await self._sync_snippet(item, target, previous_key)
            else:
                raise TypeError(f"Cannot mirror {item!r}")
            await self.db.flush()
        except SQLAlchemyError as exc:
            raise SynchronizationError(
                f"Could not mirror {item!r} to site {target.identifier}: {exc}", item
            ) from exc
        return mirror

    async def _sync_layout(self, layout: Layout, target: Site, previous_key):
        mirror = await self._counterpart(layout, target, previous_key)
        if mirror is None:
            mirror = Layout(site_id=target.id)
            self.db.add(mirror)

        parent_id = None
        if layout.parent_id is not None:
            parent = await self.db.get(Layout, layout.parent_id)
            counterpart = await self._find(Layout, target, parent.identifier)
            parent_id = counterpart.id if counterpart else None

        mirror.identifier = layout.identifier
        mirror.label = layout.label
        mirror.content = layout.content
        mirror.position = layout.position
        mirror.parent_id = parent_id
        return mirror

    async def _sync_page(self, page: Page, target: Site, previous_key):
        mirror = await self._counterpart(page, target, previous_key)
        is_new = mirror is None
        if is_new:
            mirror = Page(site_id=target.id)
            self.db.add(mirror)

        parent_id = None
        if page.parent_id is not None:
            parent = await self.db.get(Page, page.parent_id)
            counterpart = await self._find(Page, target, parent.full_path)
            parent_id = counterpart.id if counterpart else None

        layout_id = None
        if page.layout_id is not None:
            layout = await self.db.get(Layout, page.layout_id)
            counterpart = await self._find(Layout, target, layout.identifier)
            layout_id = counterpart.id if counterpart else None

        mirror.slug = page.slug
        mirror.full_path = page.full_path
        mirror.position = page.position
        mirror.is_published = page.is_published
        mirror.parent_id = parent_id
        mirror.layout_id = layout_id
        if is_new or not page.slug:
            mirror.label = page.label
        return mirror

    async def _sync_snippet(self, snippet: Snippet, target: Site, previous_key):
        mirror = await self._counterpart(snippet, target, previous_key)
        if mirror is None:
            mirror = Snippet(site_id=target.id)
            self.db.add(mirror)

        mirror.identifier = snippet.identifier
        mirror.label = snippet.label
        mirror.content = snippet.content
        mirror.position = snippet.position
        return mirror

    async def destroy_mirror(self, item, site: Site) -> int:
        """
        Remove the counterpart of ``item`` (a row of ``site``) from the
        partner site, with its subtree for layouts and pages.

        Returns the number of rows removed.
        """
        partner = await self.partner_for(site)
        if partner is None:
            return 0

        model = type(item)
        mirror = await self._find(model, partner, mirror_key(item))
        if mirror is None:
            return 0

        doomed = [mirror]
        if model in (Layout, Page):
            doomed.extend(descendants(mirror, await self.load(model, partner)))
        try:
            await self.db.execute(
                delete(model).where(model.id.in_([row.id for row in doomed]))
            )
            await self.db.flush()
        except SQLAlchemyError as exc:
            raise SynchronizationError(
                f"Could not remove mirror of {item!r} from site {partner.identifier}: {exc}", item
            ) from exc

        logger.info(f"Removed {len(doomed)} mirrored {model.__tablename__} from site {partner.identifier}")
        return len(doomed)


class MirrorSynchronizer:
    """Brings a newly mirrored site and its partner to the same structure."""

    def __init__(self, db: AsyncSession, locks: MirrorLocks | None = None):
        self.db = db
        self.locks = locks if locks is not None else mirror_locks
        self.mirror = StructureMirror(db)

    async def synchronize(self, site: Site) -> Site | None:
        """
        Push every layout, page and snippet of ``site`` to its partner and
        back. Call only when ``site.is_mirrored`` has just become true.

        Returns the partner, or ``None`` when there is nothing to pair with.
        """
        partner = await self.mirror.partner_for(site)
        if partner is None:
            logger.debug(f"Site {site.identifier} is mirrored but has no partner yet")
            return None

        async with self.locks.for_pair(site.id, partner.id):
            await self._lock_rows(site, partner)
            logger.info(f"Synchronizing mirrored sites {site.identifier} and {partner.identifier}")

            for source, target in ((site, partner), (partner, site)):
                count = await self._push(source, target)
                logger.info(f"Mirrored {count} items from {source.identifier} to {target.identifier}")

        return partner

    async def _lock_rows(self, site: Site, partner: Site) -> None:
        # Serializes concurrent activations across processes; a no-op on SQLite
        await self.db.execute(
            select(Site.id)
            .where(Site.id.in_([site.id, partner.id]))
            .with_for_update()
        )

    async def _push(self, source: Site, target: Site) -> int:
        layouts = flatten(await self.mirror.load(Layout, source))
        pages = flatten(await self.mirror.load(Page, source))
        snippets = await self.mirror.load(Snippet, source)

        items = layouts + pages + snippets
        for item in items:
            await self.mirror.sync_mirror(item, target)
        return len(items)
