import logging

from fastapi import APIRouter, Depends, HTTPException

from auth_deps import CurrentUser, get_current_user
from exceptions import KeyConflict
from schemas import ApiKeyOut, ApiKeyStatus
from stores import AlbumStore, get_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["API"])


def _owned_key(store: AlbumStore, key_id: str, user: CurrentUser) -> dict:
    key = store.get_key(key_id, user.id)
    if not key:
        raise HTTPException(status_code=404, detail="API key not found")
    return key


@router.get("/keys")
def get_api_keys(store: AlbumStore = Depends(get_store), user: CurrentUser = Depends(get_current_user)):
    keys = store.list_keys(user.id)
    return {"api_keys": [ApiKeyOut(**k) for k in keys]}


@router.post("/keys")
def create_api_key(album_id: str, store: AlbumStore = Depends(get_store), user: CurrentUser = Depends(get_current_user)):
    if not store.get_album(album_id, user.id):
        raise HTTPException(status_code=404, detail="Album not found")
    if store.has_active_key(album_id):
        raise HTTPException(status_code=409, detail="Album already has an active API key")

    try:
        new_key = store.issue_key(album_id)
    except KeyConflict:
        raise HTTPException(status_code=409, detail="Album already has an active API key")
    logger.info("issued api key %s for album %s", new_key["id"], album_id)

    return {
        "message": "API key created",
        "api_key": ApiKeyOut(**new_key),
    }


@router.patch("/keys/{key_id}")
def update_api_key(key_id: str, body: ApiKeyStatus, store: AlbumStore = Depends(get_store), user: CurrentUser = Depends(get_current_user)):
    _owned_key(store, key_id, user)
    try:
        key = store.set_key_active(key_id, body.is_active)
    except KeyConflict:
        raise HTTPException(status_code=409, detail="Album already has an active API key")
    logger.info("api key %s %s", key_id, "activated" if body.is_active else "deactivated")
    return {
        "message": f"API key {'activated' if body.is_active else 'deactivated'}",
        "api_key": ApiKeyOut(**key),
    }


@router.delete("/keys/{key_id}")
def delete_api_key(key_id: str, store: AlbumStore = Depends(get_store), user: CurrentUser = Depends(get_current_user)):
    _owned_key(store, key_id, user)
    store.delete_key(key_id)
    return {"message": "API key deleted"}


@router.get("/analytics")
def get_api_analytics(store: AlbumStore = Depends(get_store), user: CurrentUser = Depends(get_current_user)):
    keys = store.list_keys(user.id)
    return {
        "total_keys": len(keys),
        "active_keys": sum(1 for k in keys if k["is_active"]),
        "total_calls": sum(k["usage_count"] or 0 for k in keys),
    }


@router.get("/analytics/{key_id}")
def get_api_analytics_individual(key_id: str, store: AlbumStore = Depends(get_store), user: CurrentUser = Depends(get_current_user)):
    key = _owned_key(store, key_id, user)
    return {
        "key_id": key["id"],
        "album_id": key["album_id"],
        "album_title": key["album_title"],
        "is_active": key["is_active"],
        "total_calls": key["usage_count"],
        "last_used_at": key["last_used_at"],
    }
