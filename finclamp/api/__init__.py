"""
API routes for the calculators.
"""

from fastapi import APIRouter

from finclamp.api import calculations, comparisons, urls

router = APIRouter()

# Include sub-routers
router.include_router(calculations.router, prefix="/calculate", tags=["calculations"])
router.include_router(urls.router, prefix="/url", tags=["url"])
router.include_router(comparisons.router, prefix="/comparisons", tags=["comparisons"])
