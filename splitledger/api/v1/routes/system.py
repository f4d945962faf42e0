from fastapi import APIRouter
from splitledger.core.config import settings
from splitledger.core.entities import utcnow

router = APIRouter()

@router.get("/health")
async def health():
    return {"status": "ok", "backend": settings.STORE_BACKEND, "time": utcnow().isoformat()}
