import logging
from datetime import datetime
from typing import Optional

import requests

import config as settings
from exceptions import KeyConflict, StoreError
from stores.base import (
    ALBUM_FIELDS,
    TRACK_FIELDS,
    VIDEO_FIELDS,
    AlbumStore,
    KeyLookup,
    project,
)
from utils import generate_api_key, isoformat

logger = logging.getLogger(__name__)

KEY_SELECT = "id,album_id,api_key,is_active,usage_count,last_used_at,created_at,albums!inner(title,user_id)"
ALBUM_SELECT = "id,title,description,artwork_url,artist_name,artist_bio,user_id,created_at"


def _key_out(row: dict) -> dict:
    out = {k: v for k, v in row.items() if k != "albums"}
    out["album_title"] = (row.get("albums") or {}).get("title")
    return out


class SupabaseAlbumStore(AlbumStore):
    """Talks to a hosted Supabase project through its PostgREST endpoint.

    Uses the service-role key, so row level security does not apply and
    every owner check has to be expressed as a query filter here.
    """

    def __init__(self, url: str, service_key: str, session: requests.Session = None,
                 timeout: float = settings.SUPABASE_TIMEOUT):
        if not url or not service_key:
            raise StoreError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")
        self.base_url = f"{url.rstrip('/')}/rest/v1"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "apikey": service_key,
            "Authorization": f"Bearer {service_key}",
            "Content-Type": "application/json",
        }

    def _request(self, method: str, table: str, params: dict = None, json=None,
                 prefer: str = None) -> list:
        headers = dict(self.headers)
        if prefer:
            headers["Prefer"] = prefer
        try:
            resp = self.session.request(
                method,
                f"{self.base_url}/{table}",
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
            resp.raise_for_status()
        except requests.HTTPError as e:
            # 409 is a unique violation; the only one callers can cause is a second active key
            if e.response is not None and e.response.status_code == 409:
                raise KeyConflict(f"{method} {table} conflicts: {e}") from e
            raise StoreError(f"{method} {table} failed: {e}") from e
        except requests.RequestException as e:
            raise StoreError(f"{method} {table} failed: {e}") from e
        if not resp.content:
            return []
        return resp.json()

    def _select(self, table: str, **params) -> list:
        return self._request("GET", table, params=params)

    def _insert(self, table: str, row: dict, select: str = None) -> dict:
        params = {"select": select} if select else None
        rows = self._request("POST", table, params=params, json=row, prefer="return=representation")
        if not rows:
            raise StoreError(f"insert into {table} returned no row")
        return rows[0]

    def _update(self, table: str, row_id: str, values: dict) -> list:
        return self._request(
            "PATCH", table, params={"id": f"eq.{row_id}"}, json=values,
            prefer="return=representation",
        )

    def find_active_key(self, api_key: str) -> Optional[KeyLookup]:
        rows = self._select(
            "album_api_keys",
            select="id,album_id,is_active,usage_count,albums!inner(id,title,description,artwork_url,user_id)",
            api_key=f"eq.{api_key}",
            is_active="eq.true",
        )
        if len(rows) != 1:
            return None
        row = rows[0]
        return KeyLookup(
            key_id=row["id"],
            album_id=row["album_id"],
            usage_count=row.get("usage_count") or 0,
            album=project(row["albums"], ALBUM_FIELDS + ("user_id",)),
        )

    def record_usage(self, key: KeyLookup, used_at: datetime) -> Optional[int]:
        # PostgREST has no column arithmetic, so this is read-then-write
        rows = self._update(
            "album_api_keys",
            key.key_id,
            {"usage_count": key.usage_count + 1, "last_used_at": isoformat(used_at)},
        )
        return rows[0]["usage_count"] if rows else None

    def list_album_tracks(self, album_id: str) -> list:
        return self._select(
            "tracks", select=",".join(TRACK_FIELDS), album_id=f"eq.{album_id}", order="title.asc"
        )

    def list_user_videos(self, user_id: str) -> list:
        return self._select(
            "videos", select=",".join(VIDEO_FIELDS), user_id=f"eq.{user_id}", order="title.asc"
        )

    def create_album(self, user_id: str, **fields) -> tuple:
        album = self._insert("albums", dict(fields, user_id=user_id))
        try:
            key = self.issue_key(album["id"])
        except StoreError:
            logger.error("album %s created without an api key", album["id"])
            raise
        return project(album, ALBUM_SELECT.split(",")), key

    def list_albums(self, user_id: str) -> list:
        return self._select("albums", select=ALBUM_SELECT, user_id=f"eq.{user_id}", order="title.asc")

    def get_album(self, album_id: str, user_id: str) -> Optional[dict]:
        rows = self._select(
            "albums", select=ALBUM_SELECT, id=f"eq.{album_id}", user_id=f"eq.{user_id}"
        )
        return rows[0] if rows else None

    def add_track(self, album_id: str, user_id: str, **fields) -> dict:
        row = self._insert("tracks", dict(fields, album_id=album_id, user_id=user_id))
        return project(row, TRACK_FIELDS + ("album_id",))

    def add_video(self, user_id: str, **fields) -> dict:
        row = self._insert("videos", dict(fields, user_id=user_id))
        return project(row, VIDEO_FIELDS)

    def list_keys(self, user_id: str) -> list:
        rows = self._select(
            "album_api_keys",
            select=KEY_SELECT,
            **{"albums.user_id": f"eq.{user_id}"},
            order="created_at.desc",
        )
        return [_key_out(r) for r in rows]

    def get_key(self, key_id: str, user_id: str) -> Optional[dict]:
        rows = self._select(
            "album_api_keys",
            select=KEY_SELECT,
            id=f"eq.{key_id}",
            **{"albums.user_id": f"eq.{user_id}"},
        )
        return _key_out(rows[0]) if rows else None

    def has_active_key(self, album_id: str) -> bool:
        rows = self._select(
            "album_api_keys", select="id", album_id=f"eq.{album_id}", is_active="eq.true", limit=1
        )
        return bool(rows)

    def issue_key(self, album_id: str) -> dict:
        row = self._insert(
            "album_api_keys", {"album_id": album_id, "api_key": generate_api_key()}, select=KEY_SELECT
        )
        return _key_out(row)

    def set_key_active(self, key_id: str, is_active: bool) -> dict:
        self._update("album_api_keys", key_id, {"is_active": is_active})
        rows = self._select("album_api_keys", select=KEY_SELECT, id=f"eq.{key_id}")
        if not rows:
            raise StoreError(f"api key {key_id} does not exist")
        return _key_out(rows[0])

    def delete_key(self, key_id: str) -> None:
        self._request("DELETE", "album_api_keys", params={"id": f"eq.{key_id}"})
