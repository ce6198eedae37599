from typing import List

from fastapi import APIRouter, Depends

from sunpulse.api.deps import get_gateway
from sunpulse.models.schemas import Marker
from sunpulse.services.gateway import GatewayService

router = APIRouter()


@router.get("", response_model=List[Marker])
async def get_markers(gateway: GatewayService = Depends(get_gateway)):
    """Active solar regions as lat/lon markers. Cached for 5 minutes."""
    return await gateway.markers()
