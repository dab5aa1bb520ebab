"""
Resolution of an incoming (host, path) onto the site that serves it.
"""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cmsites.models.site import Site
from cmsites.services.host_alias import HostAliasResolver
from cmsites.utils.text import squeeze

logger = logging.getLogger(__name__)


class SiteDirectory:
    """
    Read-only lookup of sites by host and path.

    Resolution rules:

    1. A store holding a single site always answers with it.
    2. The host is mapped through the alias table to its canonical host.
    3. Among the sites on that host, the first one (longest path first)
       whose path prefixes the request path wins; otherwise the site
       mounted at the root of the host is used.
    """

    def __init__(self, db: AsyncSession, alias_resolver: HostAliasResolver | None = None):
        self.db = db
        self.alias_resolver = alias_resolver or HostAliasResolver()

    async def resolve(self, host: str, path: str | None = None) -> Site | None:
        total = (await self.db.execute(select(func.count(Site.id)))).scalar()
        if total == 1:
            result = await self.db.execute(select(Site).limit(1))
            return result.scalar_one()

        hostname = self.alias_resolver.resolve(host)
        result = await self.db.execute(
            select(Site)
            .where(Site.hostname == hostname)
            .order_by(func.length(Site.path).desc(), Site.identifier)
        )
        candidates = result.scalars().all()

        site = self.match(candidates, path)
        if site is None:
            logger.debug(f"No site for host={host!r} path={path!r}")
        return site

    @staticmethod
    def match(candidates, path: str | None) -> Site | None:
        """Pick the site for ``path`` among sites sharing one hostname."""
        request_path = (path or "").split("?")[0] + "/"
        root_site = None
        for site in candidates:
            if not site.path:
                root_site = site
            elif request_path.startswith(squeeze(f"/{site.path}/", "/")):
                return site
        return root_site
