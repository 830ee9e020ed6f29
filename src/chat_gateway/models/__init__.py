from .schemas import SendRequest, HealthResponse, StreamInfo, StreamListResponse

__all__ = ["SendRequest", "HealthResponse", "StreamInfo", "StreamListResponse"]
