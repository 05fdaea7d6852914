from fastapi import APIRouter, Depends

from app.core.config import Settings
from app.utils.deps import get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    return {"ok": True, "relation_store": settings.RELATION_STORE}
