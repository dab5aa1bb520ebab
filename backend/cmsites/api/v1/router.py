"""
API v1 router aggregating all endpoints.
"""
from fastapi import APIRouter

from cmsites.api.v1.resolve import router as resolve_router
from cmsites.api.v1.sites import router as sites_router
from cmsites.api.v1.structure import router as structure_router

api_router = APIRouter()

api_router.include_router(resolve_router)
api_router.include_router(sites_router)
api_router.include_router(structure_router)
