from fastapi import APIRouter, Depends

from sunpulse.api.deps import get_gateway
from sunpulse.models.schemas import Snapshot
from sunpulse.services.gateway import GatewayService

router = APIRouter()


@router.get("", response_model=Snapshot)
async def get_snapshot(gateway: GatewayService = Depends(get_gateway)):
    """
    Imagery, metrics, pulse and active-region markers in one bundle.
    Cached for 5 minutes. Upstream outages yield a static fallback, not an error.
    """
    return await gateway.snapshot()
