from fastapi import APIRouter

from keystone.api.habits import router as habits_router
from keystone.api.progress import router as progress_router
from keystone.api.users import router as users_router
from keystone.api.weeks import router as weeks_router

router = APIRouter()
router.include_router(users_router)
router.include_router(habits_router)
router.include_router(weeks_router)
router.include_router(progress_router)

__all__ = ["router"]
