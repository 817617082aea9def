from fastapi import APIRouter

from .features.create_invites.router import router as create_invites_router
from .features.deactivate_invite.router import router as deactivate_invite_router
from .features.list_invites.router import router as list_invites_router

router = APIRouter()

router.include_router(create_invites_router)
router.include_router(list_invites_router)
router.include_router(deactivate_invite_router)
