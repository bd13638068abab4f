# storefront/api/routers/health.py
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from storefront.data.database import ping
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    try:
        ping()
    except Exception as e:
        logger.error(f"Health check: baza niedostepna: {e}")
        return JSONResponse(
            {"status": "error", "components": {"db": "down"}, "detail": str(e)},
            status_code=503,
        )
    return {"status": "ok", "components": {"db": "ok"}}
