"""Database API route.

A single POST endpoint receives every action. The body is decoded by hand so
that malformed JSON, validation problems and engine failures all come back
as a normal ``{"status": "error"}`` envelope instead of an HTTP error.
"""

import json

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from sheetdb.application.services import RequestDispatcher
from sheetdb.core.exceptions import SheetDBError
from sheetdb.core.logging import get_logger
from sheetdb.infrastructure.api.schemas import DatabaseRequest, ErrorResponse, SuccessResponse

logger = get_logger(__name__)

router = APIRouter()


def get_dispatcher(request: Request) -> RequestDispatcher:
    """Dependency returning the dispatcher bound to the app's table store."""
    return request.app.state.dispatcher


def _validation_message(error: ValidationError) -> str:
    parts = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "body"
        parts.append(f"{location}: {detail['msg']}")
    return "Invalid request: " + "; ".join(parts)


@router.post("/", response_model=SuccessResponse | ErrorResponse)
async def execute_action(
    request: Request,
    dispatcher: RequestDispatcher = Depends(get_dispatcher),
) -> SuccessResponse | ErrorResponse:
    """Execute one database action.

    The body is JSON of the form ``{"action", "collection", "query",
    "options", "data"}`` and may be sent with any content type.

    Returns:
        A success envelope with the action's result, or an error envelope
        with a message. The HTTP status is 200 either way.
    """
    try:
        raw = await request.body()
        payload = json.loads(raw or b"{}")
        if not isinstance(payload, dict):
            return ErrorResponse(message="Request body must be a JSON object")
        body = DatabaseRequest.model_validate(payload)
    except json.JSONDecodeError as e:
        logger.info("Rejected request with malformed JSON", error=str(e))
        return ErrorResponse(message=f"Malformed JSON body: {e}")
    except ValidationError as e:
        logger.info("Rejected invalid request", error=str(e))
        return ErrorResponse(message=_validation_message(e))

    try:
        result = await dispatcher.execute(
            body.action,
            collection=body.collection,
            query=body.query,
            options=body.options,
            data=body.data,
        )
    except SheetDBError as e:
        logger.info(
            "Action failed",
            action=body.action,
            collection=body.collection,
            error=str(e),
            error_type=type(e).__name__,
        )
        return ErrorResponse(message=str(e))
    except Exception as e:
        logger.exception(
            "Unexpected error while executing action",
            action=body.action,
            collection=body.collection,
        )
        return ErrorResponse(message=str(e) or type(e).__name__)

    return SuccessResponse(data=result)
