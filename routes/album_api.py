import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, Response

from exceptions import BadRequest, GatewayError, Unauthorized
from stores import AlbumStore, get_store
from stores.base import project
from utils import isoformat, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/album-api", tags=["Album API"])

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

GATEWAY_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD"]


def _fetch_list(fetch, owner: str, what: str, key_id: str) -> list:
    try:
        return list(fetch(owner) or [])
    except Exception:
        logger.exception("album-api: could not fetch %s", what, extra={"key_id": key_id})
        return []


def build_album_payload(store: AlbumStore, api_key: str) -> dict:
    if not api_key:
        raise BadRequest()

    found = store.find_active_key(api_key)
    if found is None:
        raise Unauthorized()

    now = utcnow()
    total_calls = found.usage_count + 1
    try:
        recorded = store.record_usage(found, now)
        if recorded is not None:
            total_calls = recorded
    except Exception:
        logger.exception("album-api: usage update failed", extra={"key_id": found.key_id})

    tracks = _fetch_list(store.list_album_tracks, found.album_id, "tracks", found.key_id)
    # every video of the artist, not only ones tied to this album
    videos = _fetch_list(store.list_user_videos, found.owner_id, "videos", found.key_id)

    return {
        "album": project(found.album, ("id", "title", "description", "artwork_url")),
        "tracks": tracks,
        "videos": videos,
        "usage_info": {
            "total_calls": total_calls,
            "timestamp": isoformat(now),
        },
    }


def _json(status_code: int, content: dict) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)


def internal_error() -> JSONResponse:
    return _json(500, {"error": "Internal server error"})


def is_gateway_path(path: str) -> bool:
    return path == router.prefix or path.startswith(router.prefix + "/")


async def gateway_preflight(request: Request, call_next):
    """Answer every OPTIONS on the gateway before CORSMiddleware can judge it."""
    if request.method == "OPTIONS" and is_gateway_path(request.url.path):
        return Response(status_code=200, headers=CORS_HEADERS)
    return await call_next(request)


@router.api_route("", methods=GATEWAY_METHODS, include_in_schema=False)
@router.api_route("/{path:path}", methods=GATEWAY_METHODS)
def album_api(path: str = "", store: AlbumStore = Depends(get_store)):
    api_key = path.split("/")[-1]
    try:
        payload = build_album_payload(store, api_key)
    except GatewayError as e:
        return _json(e.status_code, {"error": e.message})
    except Exception:
        logger.exception("album-api: request failed")
        return internal_error()
    return _json(200, payload)
