"""Client driver API route."""

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse

from sheetdb.core.logging import get_logger
from sheetdb.infrastructure.services import get_driver_renderer

logger = get_logger(__name__)

router = APIRouter()


@router.get("/", response_class=PlainTextResponse)
async def get_driver(request: Request) -> PlainTextResponse:
    """Serve the client driver source with this deployment's URL baked in."""
    service_url = request.app.state.settings.external_url
    source = get_driver_renderer().render(service_url)
    return PlainTextResponse(source, media_type="text/x-python")
