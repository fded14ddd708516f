"""Event schema for run traces."""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """What a trace event records."""

    TOOL_CALL = "tool_call"  # a remote call about to be made
    OBSERVATION = "observation"  # state read from the tracker
    DECISION = "decision"  # per-issue action derived from that state
    ERROR = "error"  # failure that ended the run


class Event(BaseModel):
    type: EventType = Field(..., description="Event type")
    ts: str = Field(..., description="ISO 8601 timestamp")
    repo: Optional[str] = Field(None, description="Repository full name")
    payload: Dict[str, Any] = Field(default_factory=dict, description="Event payload")

    class Config:
        use_enum_values = True


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_event(event_type: EventType, payload: Dict[str, Any], repo: Optional[str] = None) -> Event:
    """Create a new event stamped with the current UTC time."""
    return Event(type=event_type, ts=now_iso(), repo=repo, payload=payload)
