from fastapi import APIRouter, Depends, HTTPException

from auth_deps import CurrentUser, get_current_user
from schemas import AlbumCreate, AlbumCreated, AlbumOut, TrackCreate, TrackOut
from stores import AlbumStore, get_store

router = APIRouter(prefix="/albums", tags=["Albums"])


@router.get("/", response_model=list[AlbumOut])
def get_albums(store: AlbumStore = Depends(get_store), current_user: CurrentUser = Depends(get_current_user)):
    return store.list_albums(current_user.id)


@router.post("/", response_model=AlbumCreated)
def create_album(
    album: AlbumCreate,
    store: AlbumStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
):
    fields = album.model_dump()
    fields["title"] = fields["title"].strip()
    if not fields["title"]:
        raise HTTPException(status_code=400, detail="Album title is required")

    created, key = store.create_album(current_user.id, **fields)
    return {"album": created, "api_key": key}


@router.get("/{album_id}", response_model=AlbumOut)
def get_album(album_id: str, store: AlbumStore = Depends(get_store), current_user: CurrentUser = Depends(get_current_user)):
    album = store.get_album(album_id, current_user.id)
    if not album:
        raise HTTPException(status_code=404, detail="Album not found or not owned by user")
    return album


@router.get("/{album_id}/tracks", response_model=list[TrackOut])
def get_album_tracks(album_id: str, store: AlbumStore = Depends(get_store), current_user: CurrentUser = Depends(get_current_user)):
    if not store.get_album(album_id, current_user.id):
        raise HTTPException(status_code=404, detail="Album not found or not owned by user")
    return store.list_album_tracks(album_id)


@router.post("/{album_id}/tracks", response_model=TrackOut)
def add_track(
    album_id: str,
    track: TrackCreate,
    store: AlbumStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
):
    if not store.get_album(album_id, current_user.id):
        raise HTTPException(status_code=404, detail="Album not found or not owned by user")
    return store.add_track(album_id, current_user.id, **track.model_dump())
