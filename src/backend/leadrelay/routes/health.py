from fastapi import APIRouter

from leadrelay.services.delivery import channel_status

router = APIRouter(prefix="", tags=["health"])


@router.get("/health")
def health_check():
    return {"status": "ok", "channels": channel_status()}
