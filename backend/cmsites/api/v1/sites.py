"""
Site management endpoints.
"""
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from cmsites.core.deps import DB, Config
from cmsites.core.exceptions import ConflictError, NotFoundError, SeedingError
from cmsites.schemas.common import MessageResponse, PaginatedResponse
from cmsites.schemas.site import SiteCreate, SiteResponse, SiteUpdate
from cmsites.services.site_service import SiteService

router = APIRouter(prefix="/sites", tags=["Sites"])


@router.get("", response_model=PaginatedResponse[SiteResponse])
async def list_sites(
    db: DB,
    config: Config,
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=20, ge=1, le=100),
    search: str | None = None,
):
    """List sites."""
    service = SiteService(db)
    sites, total = await service.list_sites(page, per_page, search)

    return PaginatedResponse.create(
        items=[SiteResponse.from_site(s, config.public_cms_path) for s in sites],
        total=total,
        page=page,
        per_page=per_page,
    )


@router.post("", response_model=SiteResponse, status_code=status.HTTP_201_CREATED)
async def create_site(data: SiteCreate, db: DB, config: Config):
    """Create a new site with its default layouts and top level page."""
    service = SiteService(db)
    try:
        site = await service.create(data)
    except SeedingError as exc:
        # The site is kept without default content; retry with POST /sites/{id}/seed
        await db.commit()
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": str(exc), "site_id": str(exc.site.id)},
        )

    return SiteResponse.from_site(site, config.public_cms_path)


@router.get("/{site_id}", response_model=SiteResponse)
async def get_site(site_id: UUID, db: DB, config: Config):
    """Get a site by ID."""
    site = await SiteService(db).get_by_id(site_id)
    if not site:
        raise NotFoundError("Site")

    return SiteResponse.from_site(site, config.public_cms_path)


@router.patch("/{site_id}", response_model=SiteResponse)
async def update_site(site_id: UUID, data: SiteUpdate, db: DB, config: Config):
    """Update a site. Switching ``is_mirrored`` on synchronizes it with its partner."""
    site = await SiteService(db).update(site_id, data)
    if not site:
        raise NotFoundError("Site")

    return SiteResponse.from_site(site, config.public_cms_path)


@router.delete("/{site_id}", response_model=MessageResponse)
async def delete_site(site_id: UUID, db: DB):
    """Delete a site and all of its content."""
    deleted = await SiteService(db).delete(site_id)
    if not deleted:
        raise NotFoundError("Site")

    return MessageResponse(message="Site deleted successfully")


@router.post("/{site_id}/seed", response_model=SiteResponse)
async def seed_site(site_id: UUID, db: DB, config: Config):
    """Create the default layouts and page for a site whose seeding failed."""
    service = SiteService(db)
    site = await service.get_by_id(site_id)
    if not site:
        raise NotFoundError("Site")
    if await service.seeder.is_seeded(site):
        raise ConflictError(f"Site {site.identifier} already has default content")

    try:
        await service.seed(site_id)
    except SeedingError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": str(exc), "site_id": str(site.id)},
        )
    return SiteResponse.from_site(site, config.public_cms_path)
