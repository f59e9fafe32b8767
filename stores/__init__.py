import config as settings
from database import SessionLocal
from stores.base import AlbumStore, KeyLookup
from stores.sql import SqlAlbumStore
from stores.supabase import SupabaseAlbumStore

__all__ = ["AlbumStore", "KeyLookup", "SqlAlbumStore", "SupabaseAlbumStore", "get_store"]


def get_store():
    """FastAPI dependency; a SQL session is only opened for the sql backend."""
    if settings.STORE_BACKEND == "supabase":
        yield SupabaseAlbumStore(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
        return

    db = SessionLocal()
    try:
        yield SqlAlbumStore(db)
    finally:
        db.close()
