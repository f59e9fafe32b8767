from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from exceptions import KeyConflict, StoreError
from models import Album, AlbumApiKey, Track, Video
from stores.base import (
    ALBUM_FIELDS,
    TRACK_FIELDS,
    VIDEO_FIELDS,
    AlbumStore,
    KeyLookup,
    project,
)
from utils import generate_api_key

KEY_FIELDS = ("id", "album_id", "api_key", "is_active", "usage_count", "last_used_at", "created_at")
ALBUM_DETAIL_FIELDS = ALBUM_FIELDS + ("artist_name", "artist_bio", "user_id", "created_at")


def _key_out(key: AlbumApiKey, album_title: str) -> dict:
    out = project(key, KEY_FIELDS)
    out["album_title"] = album_title
    return out


class SqlAlbumStore(AlbumStore):
    def __init__(self, db: Session):
        self.db = db

    def _commit(self, on_integrity=StoreError):
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise on_integrity(str(e)) from e
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(str(e)) from e

    def find_active_key(self, api_key: str) -> Optional[KeyLookup]:
        row = (
            self.db.query(AlbumApiKey, Album)
            .join(Album, AlbumApiKey.album_id == Album.id)
            .filter(AlbumApiKey.api_key == api_key, AlbumApiKey.is_active.is_(True))
            .first()
        )
        if row is None:
            return None
        key, album = row
        return KeyLookup(
            key_id=key.id,
            album_id=key.album_id,
            usage_count=key.usage_count or 0,
            album=project(album, ALBUM_FIELDS + ("user_id",)),
        )

    def record_usage(self, key: KeyLookup, used_at: datetime) -> Optional[int]:
        # single UPDATE so concurrent calls on one key never lose an increment
        try:
            self.db.query(AlbumApiKey).filter(AlbumApiKey.id == key.key_id).update(
                {
                    AlbumApiKey.usage_count: AlbumApiKey.usage_count + 1,
                    AlbumApiKey.last_used_at: used_at,
                },
                synchronize_session=False,
            )
            self.db.commit()
            return (
                self.db.query(AlbumApiKey.usage_count)
                .filter(AlbumApiKey.id == key.key_id)
                .scalar()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            raise StoreError(str(e)) from e

    def list_album_tracks(self, album_id: str) -> list:
        tracks = self.db.query(Track).filter(Track.album_id == album_id).order_by(Track.title).all()
        return [project(t, TRACK_FIELDS) for t in tracks]

    def list_user_videos(self, user_id: str) -> list:
        videos = self.db.query(Video).filter(Video.user_id == user_id).order_by(Video.title).all()
        return [project(v, VIDEO_FIELDS) for v in videos]

    def create_album(self, user_id: str, **fields) -> tuple:
        album = Album(user_id=user_id, **fields)
        key = AlbumApiKey(api_key=generate_api_key())
        album.api_keys.append(key)
        self.db.add(album)
        self._commit()
        self.db.refresh(album)
        self.db.refresh(key)
        return project(album, ALBUM_DETAIL_FIELDS), _key_out(key, album.title)

    def list_albums(self, user_id: str) -> list:
        albums = self.db.query(Album).filter(Album.user_id == user_id).order_by(Album.title).all()
        return [project(a, ALBUM_DETAIL_FIELDS) for a in albums]

    def get_album(self, album_id: str, user_id: str) -> Optional[dict]:
        album = self.db.query(Album).filter(Album.id == album_id, Album.user_id == user_id).first()
        return project(album, ALBUM_DETAIL_FIELDS) if album else None

    def add_track(self, album_id: str, user_id: str, **fields) -> dict:
        track = Track(album_id=album_id, user_id=user_id, **fields)
        self.db.add(track)
        self._commit()
        self.db.refresh(track)
        return project(track, TRACK_FIELDS + ("album_id",))

    def add_video(self, user_id: str, **fields) -> dict:
        video = Video(user_id=user_id, **fields)
        self.db.add(video)
        self._commit()
        self.db.refresh(video)
        return project(video, VIDEO_FIELDS)

    def list_keys(self, user_id: str) -> list:
        rows = (
            self.db.query(AlbumApiKey, Album.title)
            .join(Album, AlbumApiKey.album_id == Album.id)
            .filter(Album.user_id == user_id)
            .order_by(AlbumApiKey.created_at.desc())
            .all()
        )
        return [_key_out(key, title) for key, title in rows]

    def get_key(self, key_id: str, user_id: str) -> Optional[dict]:
        row = (
            self.db.query(AlbumApiKey, Album.title)
            .join(Album, AlbumApiKey.album_id == Album.id)
            .filter(AlbumApiKey.id == key_id, Album.user_id == user_id)
            .first()
        )
        return _key_out(*row) if row else None

    def has_active_key(self, album_id: str) -> bool:
        return (
            self.db.query(AlbumApiKey.id)
            .filter(AlbumApiKey.album_id == album_id, AlbumApiKey.is_active.is_(True))
            .first()
            is not None
        )

    def issue_key(self, album_id: str) -> dict:
        album = self.db.query(Album).filter(Album.id == album_id).first()
        if album is None:
            raise StoreError(f"album {album_id} does not exist")
        key = AlbumApiKey(album_id=album_id, api_key=generate_api_key())
        self.db.add(key)
        self._commit(on_integrity=KeyConflict)
        self.db.refresh(key)
        return _key_out(key, album.title)

    def set_key_active(self, key_id: str, is_active: bool) -> dict:
        key = self.db.query(AlbumApiKey).filter(AlbumApiKey.id == key_id).first()
        if key is None:
            raise StoreError(f"api key {key_id} does not exist")
        key.is_active = is_active
        self._commit(on_integrity=KeyConflict)
        self.db.refresh(key)
        return _key_out(key, key.album.title)

    def delete_key(self, key_id: str) -> None:
        key = self.db.query(AlbumApiKey).filter(AlbumApiKey.id == key_id).first()
        if key is None:
            return
        self.db.delete(key)
        self._commit()
