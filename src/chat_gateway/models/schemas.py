from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class SendRequest(BaseModel):
    """Chat message to forward to the pub/sub service."""
    model_config = ConfigDict(extra="ignore")

    topic: StrictStr = Field(..., description="Target topic")
    message: StrictStr = Field(..., description="Message text")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    upstream: str = Field(..., description="Configured pub/sub service URL")
    active_streams: int = Field(..., description="Number of active SSE streams")


class StreamInfo(BaseModel):
    """Summary of an active subscription stream."""
    session_id: str = Field(..., description="Stream session ID")
    topic: str = Field(..., description="Subscribed topic")
    started_at: datetime = Field(..., description="When the stream was opened")


class StreamListResponse(BaseModel):
    """Active subscription streams."""
    count: int = Field(..., description="Number of active streams")
    streams: List[StreamInfo] = Field(default_factory=list)
