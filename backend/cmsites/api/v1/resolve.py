"""
Site resolution endpoints.
"""
from fastapi import APIRouter, Query

from cmsites.core.deps import Config, Directory, RequestSite
from cmsites.core.exceptions import NotFoundError
from cmsites.schemas.site import SiteResponse

router = APIRouter(tags=["Resolution"])


@router.get("/resolve", response_model=SiteResponse)
async def resolve_site(
    directory: Directory,
    config: Config,
    host: str = Query(min_length=1),
    path: str | None = None,
):
    """Resolve a host and path to the site serving them."""
    site = await directory.resolve(host, path)
    if site is None:
        raise NotFoundError("Site")

    return SiteResponse.from_site(site, config.public_cms_path)


@router.get("/site", response_model=SiteResponse)
async def current_site(site: RequestSite, config: Config):
    """The site serving this request's Host header."""
    return SiteResponse.from_site(site, config.public_cms_path)
