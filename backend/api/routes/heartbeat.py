"""
Heartbeat endpoint.

Lets load balancers and uptime checks confirm the API process is serving.
"""

from fastapi import APIRouter
from pydantic import BaseModel

router = APIRouter()


class HeartbeatResponse(BaseModel):
    """Heartbeat response model."""

    status: str


@router.get("/heartbeat", response_model=HeartbeatResponse)
async def get_heartbeat() -> HeartbeatResponse:
    """
    Basic liveness check.

    Returns 200 while the API is running. No dependency is contacted.
    """
    return HeartbeatResponse(status="ok")
