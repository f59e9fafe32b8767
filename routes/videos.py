from fastapi import APIRouter, Depends

from auth_deps import CurrentUser, get_current_user
from schemas import VideoCreate, VideoOut
from stores import AlbumStore, get_store

router = APIRouter(prefix="/videos", tags=["Videos"])


@router.get("/", response_model=list[VideoOut])
def get_videos(store: AlbumStore = Depends(get_store), current_user: CurrentUser = Depends(get_current_user)):
    return store.list_user_videos(current_user.id)


@router.post("/", response_model=VideoOut)
def add_video(
    video: VideoCreate,
    store: AlbumStore = Depends(get_store),
    current_user: CurrentUser = Depends(get_current_user),
):
    return store.add_video(current_user.id, **video.model_dump())
