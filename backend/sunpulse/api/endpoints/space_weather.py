from typing import List

from fastapi import APIRouter, Depends

from sunpulse.api.deps import get_gateway
from sunpulse.models.schemas import AlertEntry, CmeEvent
from sunpulse.services.gateway import GatewayService

router = APIRouter()


@router.get("/alerts", response_model=List[AlertEntry])
async def get_alerts(gateway: GatewayService = Depends(get_gateway)):
    """Latest 10 NOAA SWPC alerts, oldest first. Cached for 2 minutes."""
    return await gateway.alerts()


@router.get("/cme", response_model=List[CmeEvent])
async def get_cme_events(gateway: GatewayService = Depends(get_gateway)):
    """Latest 5 CME analyses with arrival estimates. Cached for 2 minutes."""
    return await gateway.cme()
