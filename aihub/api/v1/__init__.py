"""API v1 router: aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from aihub.api.v1.assistants import router as assistants_router
from aihub.api.v1.knowledge import router as knowledge_router
from aihub.api.v1.logs import router as logs_router
from aihub.api.v1.members import router as members_router
from aihub.api.v1.organizations import router as orgs_router
from aihub.api.v1.tools import router as tools_router
from aihub.api.v1.users import router as users_router

router = APIRouter()
router.include_router(users_router)
router.include_router(orgs_router)
router.include_router(members_router)
router.include_router(assistants_router)
router.include_router(knowledge_router)
router.include_router(tools_router)
router.include_router(logs_router)
