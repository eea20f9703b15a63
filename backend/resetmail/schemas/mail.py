"""Schemas for password-reset dispatch results and transport status."""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TransportStatus(str, Enum):
    """Lifecycle of the process-wide mail transport."""
    UNCONFIGURED = "unconfigured"
    CONFIGURING = "configuring"
    READY = "ready"
    FAILED = "failed"


class DispatchOutcome(str, Enum):
    DELIVERED = "delivered"
    SIMULATED = "simulated"
    FAILED = "failed"


class ResetMetadata(BaseModel):
    """Optional request context attached to a reset email."""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    person_name: Optional[str] = None
    request_ip: Optional[str] = None
    user_agent: Optional[str] = None


class DispatchResult(BaseModel):
    """Uniform result of one dispatch, whichever path was taken.

    ``reset_link`` is always present. ``message_id`` is only meaningful when
    ``success`` is true and ``development_mode`` is false.
    """
    success: bool
    reset_link: str
    recipient: Optional[str] = None
    development_mode: bool = False
    # Set on send failures so callers can show the link as a fallback
    fallback_link_exposed: bool = False
    message_id: Optional[str] = None
    info: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    error_details: Optional[Dict[str, Any]] = None

    @property
    def outcome(self) -> DispatchOutcome:
        if not self.success:
            return DispatchOutcome.FAILED
        if self.development_mode:
            return DispatchOutcome.SIMULATED
        return DispatchOutcome.DELIVERED


class MailStatusResponse(BaseModel):
    """Transport status exposed to operators. Never carries credentials."""
    status: TransportStatus
    ready: bool
    missing_settings: List[str] = Field(default_factory=list)
    last_error: Optional[str] = None
    host: Optional[str] = None
    port: Optional[int] = None
    secure: Optional[bool] = None
