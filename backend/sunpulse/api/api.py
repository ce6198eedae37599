from fastapi import APIRouter

from sunpulse.api.endpoints import markers, planets, snapshot, space_weather

api_router = APIRouter()

api_router.include_router(snapshot.router, prefix="/snapshot", tags=["snapshot"])
api_router.include_router(space_weather.router, tags=["space-weather"])
api_router.include_router(planets.router, prefix="/planets", tags=["planets"])
api_router.include_router(markers.router, prefix="/markers", tags=["markers"])
