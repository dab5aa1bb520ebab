"""
Layout, page and snippet endpoints, scoped to a site.

Writes on a mirrored site are applied to its partner as well.
"""
from uuid import UUID

from fastapi import APIRouter, status

from cmsites.core.deps import DB, SiteInPath
from cmsites.core.exceptions import NotFoundError
from cmsites.schemas.common import MessageResponse
from cmsites.schemas.structure import (
    LayoutCreate,
    LayoutResponse,
    LayoutUpdate,
    PageCreate,
    PageResponse,
    PageUpdate,
    SnippetCreate,
    SnippetResponse,
    SnippetUpdate,
)
from cmsites.services.structure_service import LayoutService, PageService, SnippetService

router = APIRouter(prefix="/sites/{site_id}", tags=["Structure"])


# ============================================================================
# Layouts
# ============================================================================

@router.get("/layouts", response_model=list[LayoutResponse])
async def list_layouts(site: SiteInPath, db: DB):
    """List layouts, parents before children."""
    layouts = await LayoutService(db).list(site)
    return [LayoutResponse.model_validate(layout) for layout in layouts]


@router.post("/layouts", response_model=LayoutResponse, status_code=status.HTTP_201_CREATED)
async def create_layout(data: LayoutCreate, site: SiteInPath, db: DB):
    layout = await LayoutService(db).create(site, data)
    return LayoutResponse.model_validate(layout)


@router.patch("/layouts/{layout_id}", response_model=LayoutResponse)
async def update_layout(layout_id: UUID, data: LayoutUpdate, site: SiteInPath, db: DB):
    layout = await LayoutService(db).update(site, layout_id, data)
    return LayoutResponse.model_validate(layout)


@router.delete("/layouts/{layout_id}", response_model=MessageResponse)
async def delete_layout(layout_id: UUID, site: SiteInPath, db: DB):
    """Delete a layout with its child layouts."""
    if not await LayoutService(db).delete(site, layout_id):
        raise NotFoundError("Layout")
    return MessageResponse(message="Layout deleted successfully")


# ============================================================================
# Pages
# ============================================================================

@router.get("/pages", response_model=list[PageResponse])
async def list_pages(site: SiteInPath, db: DB):
    """List pages, parents before children."""
    pages = await PageService(db).list(site)
    return [PageResponse.model_validate(page) for page in pages]


@router.post("/pages", response_model=PageResponse, status_code=status.HTTP_201_CREATED)
async def create_page(data: PageCreate, site: SiteInPath, db: DB):
    page = await PageService(db).create(site, data)
    return PageResponse.model_validate(page)


@router.patch("/pages/{page_id}", response_model=PageResponse)
async def update_page(page_id: UUID, data: PageUpdate, site: SiteInPath, db: DB):
    """Update a page; slug or parent changes move its whole subtree."""
    page = await PageService(db).update(site, page_id, data)
    return PageResponse.model_validate(page)


@router.delete("/pages/{page_id}", response_model=MessageResponse)
async def delete_page(page_id: UUID, site: SiteInPath, db: DB):
    """Delete a page with its child pages."""
    if not await PageService(db).delete(site, page_id):
        raise NotFoundError("Page")
    return MessageResponse(message="Page deleted successfully")


# ============================================================================
# Snippets
# ============================================================================

@router.get("/snippets", response_model=list[SnippetResponse])
async def list_snippets(site: SiteInPath, db: DB):
    snippets = await SnippetService(db).list(site)
    return [SnippetResponse.model_validate(snippet) for snippet in snippets]


@router.post("/snippets", response_model=SnippetResponse, status_code=status.HTTP_201_CREATED)
async def create_snippet(data: SnippetCreate, site: SiteInPath, db: DB):
    snippet = await SnippetService(db).create(site, data)
    return SnippetResponse.model_validate(snippet)


@router.patch("/snippets/{snippet_id}", response_model=SnippetResponse)
async def update_snippet(snippet_id: UUID, data: SnippetUpdate, site: SiteInPath, db: DB):
    snippet = await SnippetService(db).update(site, snippet_id, data)
    return SnippetResponse.model_validate(snippet)


@router.delete("/snippets/{snippet_id}", response_model=MessageResponse)
async def delete_snippet(snippet_id: UUID, site: SiteInPath, db: DB):
    if not await SnippetService(db).delete(site, snippet_id):
        raise NotFoundError("Snippet")
    return MessageResponse(message="Snippet deleted successfully")
