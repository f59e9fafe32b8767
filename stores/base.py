from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class KeyLookup:
    """An active API key row joined to the album it unlocks."""

    key_id: str
    album_id: str
    usage_count: int
    album: dict

    @property
    def owner_id(self) -> str:
        return self.album["user_id"]


class AlbumStore:
    """Everything the service reads from or writes to the backing store.

    Read methods return plain dicts so routes do not care which backend
    produced them. Failures surface as ``exceptions.StoreError``.
    """

    # gateway

    def find_active_key(self, api_key: str) -> Optional[KeyLookup]:
        raise NotImplementedError

    def record_usage(self, key: KeyLookup, used_at: datetime) -> Optional[int]:
        """Bump the key's usage counter; returns the new count when known."""
        raise NotImplementedError

    def list_album_tracks(self, album_id: str) -> list:
        raise NotImplementedError

    def list_user_videos(self, user_id: str) -> list:
        raise NotImplementedError

    # catalog

    def create_album(self, user_id: str, **fields) -> tuple:
        """Insert an album and its first API key; returns ``(album, key)``."""
        raise NotImplementedError

    def list_albums(self, user_id: str) -> list:
        raise NotImplementedError

    def get_album(self, album_id: str, user_id: str) -> Optional[dict]:
        raise NotImplementedError

    def add_track(self, album_id: str, user_id: str, **fields) -> dict:
        raise NotImplementedError

    def add_video(self, user_id: str, **fields) -> dict:
        raise NotImplementedError

    # key management

    def list_keys(self, user_id: str) -> list:
        raise NotImplementedError

    def get_key(self, key_id: str, user_id: str) -> Optional[dict]:
        raise NotImplementedError

    def has_active_key(self, album_id: str) -> bool:
        raise NotImplementedError

    def issue_key(self, album_id: str) -> dict:
        raise NotImplementedError

    def set_key_active(self, key_id: str, is_active: bool) -> dict:
        raise NotImplementedError

    def delete_key(self, key_id: str) -> None:
        raise NotImplementedError


ALBUM_FIELDS = ("id", "title", "description", "artwork_url")
TRACK_FIELDS = ("id", "title", "file_url", "duration")
VIDEO_FIELDS = ("id", "title", "file_url", "thumbnail_url", "duration")


def project(row, fields) -> dict:
    if isinstance(row, dict):
        return {f: row.get(f) for f in fields}
    return {f: getattr(row, f) for f in fields}
