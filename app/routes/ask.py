"""Ask endpoint: relay a prompt through the model into the DingTalk group."""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from app.config import settings
from app.relay import RelayHandler
from app.routes.metrics import relay_requests_total

router = APIRouter()

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

JSON_MEDIA_TYPE = "application/json; charset=utf-8"


def get_relay_handler() -> RelayHandler:
    """Handler built from the process-wide settings; overridden in tests."""
    return RelayHandler(settings)


@router.api_route("/api/ask", methods=ALL_METHODS)
async def ask(request: Request, handler: RelayHandler = Depends(get_relay_handler)):
    """
    Ask the model and post its answer to the group.

    GET reads ``?prompt=``; any other method reads ``{"prompt": "..."}``.

    Returns 200 ``{ok, answer}``, 400 ``{error}`` for an empty prompt, and
    500 ``{error, need}`` or ``{error, detail}`` otherwise.
    """
    body = b"" if request.method == "GET" else await request.body()
    outcome = await handler.handle(request.method, request.query_params, body)

    relay_requests_total.labels(result=outcome.result).inc()

    return JSONResponse(
        content=outcome.body,
        status_code=outcome.status_code,
        media_type=JSON_MEDIA_TYPE,
    )
