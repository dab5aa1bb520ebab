"""
FastAPI dependencies for database access and site lookup.
"""
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from cmsites.config import SiteConfig, settings
from cmsites.core.exceptions import NotFoundError
from cmsites.database import get_db
from cmsites.models.site import Site
from cmsites.services.host_alias import HostAliasResolver
from cmsites.services.site_directory import SiteDirectory
from cmsites.services.site_service import SiteService


def get_site_config() -> SiteConfig:
    """Site resolution settings; override in tests."""
    return settings.site_config


DB = Annotated[AsyncSession, Depends(get_db)]
Config = Annotated[SiteConfig, Depends(get_site_config)]


def get_site_directory(db: DB, config: Config) -> SiteDirectory:
    return SiteDirectory(db, HostAliasResolver(config.hostname_aliases))


Directory = Annotated[SiteDirectory, Depends(get_site_directory)]


async def get_site_or_404(site_id: UUID, db: DB) -> Site:
    """Load the site named in the URL."""
    site = await SiteService(db).get_by_id(site_id)
    if not site:
        raise NotFoundError("Site")
    return site


async def get_request_site(request: Request, directory: Directory) -> Site:
    """Resolve the site serving this request from its Host header.

    The content path is taken from the ``path`` query parameter, falling
    back to the request's own path.
    """
    host = request.headers.get("host", "")
    path = request.query_params.get("path", request.url.path)
    site = await directory.resolve(host, path)
    if site is None:
        raise NotFoundError("Site")
    return site


SiteInPath = Annotated[Site, Depends(get_site_or_404)]
RequestSite = Annotated[Site, Depends(get_request_site)]
