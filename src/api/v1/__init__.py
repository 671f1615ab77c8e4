"""API v1 router configuration."""

from fastapi import APIRouter

from api.v1.routes.applications import router as applications_router
from api.v1.routes.comments import router as comments_router
from api.v1.routes.deals import router as deals_router
from api.v1.routes.documents import router as documents_router
from api.v1.routes.groups import router as groups_router
from api.v1.routes.users import router as users_router

router = APIRouter()
router.include_router(users_router)
router.include_router(groups_router)
router.include_router(applications_router)
router.include_router(deals_router)
router.include_router(documents_router)
router.include_router(comments_router)
