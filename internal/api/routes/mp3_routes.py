"""
MP3 Routes - Turn a video URL into a hosted MP3.

POST /mp3 takes the raw URL as the request body (not JSON) and answers in
plain text with the public URL of the file:

    $ curl -X POST --data 'https://youtu.be/abc123' http://localhost:8100/mp3
    localhost:8100/files/abc123.mp3
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Request
from fastapi.responses import PlainTextResponse

from core.dependencies import get_mp3_service_dependency
from core.errors import (
    DownloadError,
    InvalidURLError,
    StoreIOError,
    UnrecognizedVideoURLError,
)
from core.logger import logger
from core.messages import ErrorMessages
from internal.api.utils import preflight_response, text_error_response, text_response
from services.mp3_service import Mp3Service

router = APIRouter()


@router.post(
    "/mp3",
    response_class=PlainTextResponse,
    tags=["MP3"],
    summary="Fetch a video's audio as MP3",
    description="""
Body is the raw video URL (`https://youtu.be/<id>` or any URL with a `v`
query parameter). Returns `<host>/files/<id>.mp3`.

Already-downloaded videos are answered from the store without a download.
After a new download the store is trimmed back toward its size budget.
""",
    responses={
        200: {"description": "Public URL of the MP3"},
        400: {"description": "Missing, malformed or unrecognized URL"},
        500: {"description": "Download failed"},
    },
)
async def mp3(
    request: Request,
    background_tasks: BackgroundTasks,
    service: Mp3Service = Depends(get_mp3_service_dependency),
) -> PlainTextResponse:
    """Resolve a video URL to a hosted MP3, downloading it on cache miss."""
    try:
        body = await request.body()
    except Exception as e:
        logger.error(f"{ErrorMessages.BODY_READ_FAILED}: {e}")
        return text_error_response(ErrorMessages.BODY_READ_FAILED, 500)

    raw_url = body.decode("utf-8", errors="replace")
    if not raw_url.strip():
        return text_error_response(ErrorMessages.URL_NOT_PROVIDED, 400)

    try:
        outcome = await service.get_or_fetch(raw_url)

    except InvalidURLError:
        logger.info(f"Rejected invalid URL: {raw_url[:200]!r}")
        return text_error_response(ErrorMessages.INVALID_URL, 400)

    except UnrecognizedVideoURLError:
        logger.info(f"Rejected unrecognized video URL: {raw_url[:200]!r}")
        return text_error_response(ErrorMessages.BAD_URL, 400)

    except (DownloadError, StoreIOError) as e:
        logger.error(f"Fetch failed for {raw_url.strip()}: {e}")
        return text_error_response(ErrorMessages.INTERNAL_ERROR, 500)

    host = request.headers.get("host", request.url.netloc)
    public_url = service.public_url(host, outcome.video_id)

    # Only a fresh download can push the store over budget
    if outcome.fetched:
        background_tasks.add_task(service.enforce_budget)

    return text_response(public_url)


# Declared after POST: for other verbs Starlette reports the first route
# matching the path, so 405 responses advertise Allow: POST
@router.options("/mp3", include_in_schema=False)
async def mp3_preflight() -> PlainTextResponse:
    """CORS preflight for browser clients."""
    return preflight_response()
