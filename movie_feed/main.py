import httpx
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from .clients.tmdb_client import fetch_person_credits
from .config import settings
from .logging_config import configure_logging, get_logger
from .middleware.logging import RequestContextMiddleware
from .schemas.feed_schemas import ErrorResponse
from .schemas.query_schemas import QueryArgs
from .services.feed_service import build_feed
from .utils.utils_rss import RSS_CONTENT_TYPE, render_rss
from .utils.utils_tmdb_client import TmdbError, UnknownTmdbError

configure_logging(json_format=settings.json_logs, log_level=settings.log_level)

logger = get_logger(__name__)

app = FastAPI(title='Movie Feed')
app.add_middleware(RequestContextMiddleware, timeout=settings.api.request_timeout)


@app.exception_handler(HTTPException)
async def error_response_handler(request: Request, exc: HTTPException) -> JSONResponse:
    body = ErrorResponse(code=exc.status_code, message=str(exc.detail))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def _validation_message(error: ValidationError) -> str:
    return '; '.join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
        for err in error.errors()
    )


def get_query_args(request: Request) -> QueryArgs:
    try:
        return QueryArgs.from_query(request.query_params)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=_validation_message(e))


@app.get('/ok')
async def ok() -> Response:
    return Response(status_code=200)


@app.get(
    '/person/{person_id}/combined_credits',
    response_class=Response,
    responses={
        200: {'content': {RSS_CONTENT_TYPE: {}}},
        422: {'model': ErrorResponse},
        502: {'model': ErrorResponse},
    },
)
async def combined_credits(person_id: int, query: QueryArgs = Depends(get_query_args)):
    try:
        details, credits = await fetch_person_credits(person_id)
    except TmdbError as e:
        log = logger.error if e.is_severe else logger.warning
        log('TMDB returned an error', person_id=person_id, tmdb_code=e.code, error=e.message)
        raise HTTPException(
            status_code=502, detail=f"error received from tmdb: {e.message}")
    except (UnknownTmdbError, httpx.HTTPError, ValidationError) as e:
        logger.warning('Unable to fetch credits', person_id=person_id, error=str(e))
        raise HTTPException(
            status_code=502, detail=f"TMDB service error: {str(e)}")

    channel = build_feed(details, credits, query)
    return Response(content=render_rss(channel), media_type=RSS_CONTENT_TYPE)


def run() -> None:
    """Run the API server."""
    import uvicorn

    logger.info(
        'Listening for API requests',
        address=settings.api.listen_address,
        port=settings.api.listen_port,
    )
    uvicorn.run(
        app,
        host=settings.api.listen_address,
        port=settings.api.listen_port,
        log_config=None,
    )


if __name__ == '__main__':
    run()
