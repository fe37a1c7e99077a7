from fastapi import Request

from callboard.services.ringcentral_client import RingCentralClient


def get_ringcentral_client(request: Request) -> RingCentralClient:
    return request.app.state.ringcentral
