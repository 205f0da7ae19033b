from fastapi import APIRouter, Depends

from app.presentation.dependencies import get_app_settings
from app.schemas.responses import HealthOut, StatusOut
from app.settings import Settings


router = APIRouter(tags=["Health"])


@router.get("/", response_model=StatusOut)
async def root(settings: Settings = Depends(get_app_settings)) -> StatusOut:
    return StatusOut(env=settings.app_env)


@router.get("/healthz", response_model=HealthOut)
async def healthz() -> HealthOut:
    return HealthOut()
