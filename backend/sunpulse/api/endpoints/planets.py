from typing import List

from fastapi import APIRouter, Depends

from sunpulse.api.deps import get_gateway
from sunpulse.models.schemas import PlanetPosition
from sunpulse.services.gateway import GatewayService

router = APIRouter()


@router.get("", response_model=List[PlanetPosition])
async def get_planets(gateway: GatewayService = Depends(get_gateway)):
    return await gateway.planets()
