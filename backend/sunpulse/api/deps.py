from fastapi import Request

from sunpulse.services.gateway import GatewayService


def get_gateway(request: Request) -> GatewayService:
    return request.app.state.gateway
