from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse, PlainTextResponse, Response

from ...core.config import settings

router = APIRouter(tags=["Static"])


@router.get("/index", response_model=None)
async def index() -> Response:
    """Serve the chat frontend page."""
    path = Path(settings.index_file)
    if not path.is_file():
        return PlainTextResponse("404 page not found", status_code=404)
    return FileResponse(path, media_type="text/html")
