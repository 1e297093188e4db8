from fastapi import APIRouter

from .auth_api import router as auth_router
from .chargers import router as chargers_router
from .setvariables import router as setvariables_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(chargers_router)
router.include_router(setvariables_router)
