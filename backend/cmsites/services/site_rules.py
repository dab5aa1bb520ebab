"""
Field derivation, path cleaning and validation for sites.

Run ``normalize_site`` then ``validate_site`` before every persist.
"""
import re

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from cmsites.core.exceptions import SiteValidationError
from cmsites.models.site import Site
from cmsites.utils.text import clean_path, is_blank, slugify, titleize

IDENTIFIER_FORMAT = re.compile(r"\w[a-z0-9_-]*", re.IGNORECASE)
HOSTNAME_FORMAT = re.compile(r"[\w.-]+(?::\d+)?")

# A mirrored site pairs with exactly one other mirrored site
MAX_MIRRORED_SITES = 2

BLANK = "can't be blank"
INVALID = "is invalid"
TAKEN = "has already been taken"


def normalize_site(site: Site) -> Site:
    """Derive blank identifier, hostname and label, and clean the path."""
    if is_blank(site.identifier):
        site.identifier = slugify(site.hostname)
    if is_blank(site.hostname):
        site.hostname = site.identifier
    if is_blank(site.label):
        site.label = titleize(site.identifier)
    site.path = clean_path(site.path)
    return site


async def validate_site(db: AsyncSession, site: Site) -> None:
    """
    Check presence, format, uniqueness and the mirror limit.

    :raises SiteValidationError: with every failing field.
    """
    errors: dict[str, list[str]] = {}

    def add(field: str, message: str) -> None:
        errors.setdefault(field, []).append(message)

    if is_blank(site.identifier):
        add("identifier", BLANK)
    elif not IDENTIFIER_FORMAT.fullmatch(site.identifier):
        add("identifier", INVALID)

    if is_blank(site.label):
        add("label", BLANK)

    if is_blank(site.hostname):
        add("hostname", BLANK)
    elif not HOSTNAME_FORMAT.fullmatch(site.hostname):
        add("hostname", INVALID)

    others = [Site.id != site.id] if site.id is not None else []

    if "identifier" not in errors:
        taken = await db.execute(
            select(Site.id).where(Site.identifier == site.identifier, *others).limit(1)
        )
        if taken.first() is not None:
            add("identifier", TAKEN)

    if "hostname" not in errors:
        taken = await db.execute(
            select(Site.id)
            .where(and_(Site.hostname == site.hostname, Site.path == site.path), *others)
            .limit(1)
        )
        if taken.first() is not None:
            add("hostname", TAKEN)

    if site.is_mirrored:
        # Concurrent activations queue on the mirrored rows until the first commits
        await db.execute(
            select(Site.id).where(Site.is_mirrored.is_(True), *others).with_for_update()
        )
        mirrored = await db.execute(
            select(func.count(Site.id)).where(Site.is_mirrored.is_(True), *others)
        )
        if mirrored.scalar() >= MAX_MIRRORED_SITES:
            add("is_mirrored", f"only {MAX_MIRRORED_SITES} sites can be mirrored at a time")

    if errors:
        raise SiteValidationError(errors)
