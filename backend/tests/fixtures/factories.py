"""
Row factories for tests. They write straight to the session and skip
normalization, seeding and mirroring.
"""
from sqlalchemy.ext.asyncio import AsyncSession

from cmsites.models import Layout, Page, Site, Snippet


async def add_site(db: AsyncSession, identifier: str, hostname: str, path: str = "",
                   is_mirrored: bool = False) -> Site:
    site = Site(
        identifier=identifier,
        label=identifier.title(),
        hostname=hostname,
        path=path,
        is_mirrored=is_mirrored,
    )
    db.add(site)
    await db.flush()
    await db.refresh(site)
    return site


async def add_layout(db: AsyncSession, site: Site, identifier: str, parent: Layout | None = None,
                     content: str = "{{ cms:page:content }}", position: int = 0) -> Layout:
    layout = Layout(
        site_id=site.id,
        identifier=identifier,
        label=identifier.title(),
        content=content,
        parent_id=parent.id if parent else None,
        position=position,
    )
    db.add(layout)
    await db.flush()
    return layout


async def add_page(db: AsyncSession, site: Site, slug: str, parent: Page | None = None,
                   layout: Layout | None = None, label: str | None = None) -> Page:
    full_path = "/" if parent is None else f"{parent.full_path.rstrip('/')}/{slug}"
    page = Page(
        site_id=site.id,
        label=label or (slug.title() or "Home"),
        slug=slug,
        full_path=full_path,
        parent_id=parent.id if parent else None,
        layout_id=layout.id if layout else None,
    )
    db.add(page)
    await db.flush()
    return page


async def add_snippet(db: AsyncSession, site: Site, identifier: str, content: str = "snippet") -> Snippet:
    snippet = Snippet(site_id=site.id, identifier=identifier, label=identifier.title(), content=content)
    db.add(snippet)
    await db.flush()
    return snippet
