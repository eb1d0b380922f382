"""API v1 router aggregating all endpoint routers.

``router`` is mounted under the configured API prefix (``/api``).
``oauth_router`` is mounted at the application root.
"""

from __future__ import annotations

from fastapi import APIRouter

from deals_to_meals.api.v1.endpoints import (
    account,
    deals,
    health,
    kroger_oauth,
    profile,
    recipes,
    site,
)


router = APIRouter()

router.include_router(health.router)
router.include_router(site.router)
router.include_router(deals.router)
router.include_router(recipes.router)
router.include_router(account.router)
router.include_router(profile.router)

oauth_router = APIRouter()
oauth_router.include_router(kroger_oauth.router)
