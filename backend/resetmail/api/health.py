"""Health check and mail status endpoints."""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from resetmail.api.deps import get_transport_state
from resetmail.mail.configurator import MailTransportState
from resetmail.schemas.mail import MailStatusResponse

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(state: MailTransportState = Depends(get_transport_state)) -> Dict[str, Any]:
    """Liveness plus delivery mode.

    Simulated delivery is still healthy: reset links are logged instead of
    mailed.
    """
    return {
        "status": "healthy",
        "mail_delivery": "live" if state.is_ready else "simulated",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/api/v1/mail/status", response_model=MailStatusResponse)
async def mail_status(state: MailTransportState = Depends(get_transport_state)) -> MailStatusResponse:
    return state.describe()
