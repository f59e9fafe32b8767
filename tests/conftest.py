import time

import jwt
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import config as settings
import models  # noqa: F401
from db_base import Base
from main import app
from models import Album, AlbumApiKey, Track, Video
from stores import SqlAlbumStore, get_store


def make_token(user_id: str, secret: str = None, **claims) -> str:
    payload = {
        "sub": user_id,
        "aud": settings.JWT_AUDIENCE,
        "exp": int(time.time()) + 3600,
        **claims,
    }
    return jwt.encode(payload, secret or settings.SUPABASE_JWT_SECRET, algorithm="HS256")


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {make_token(user_id)}"}


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def client(session_factory, monkeypatch):
    monkeypatch.setattr(settings, "STORE_BACKEND", "sql")

    def override_get_store():
        db = session_factory()
        try:
            yield SqlAlbumStore(db)
        finally:
            db.close()

    app.dependency_overrides[get_store] = override_get_store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def demo_album(session_factory):
    """Album "Demo" owned by U1, key abc123 at usage 5, two tracks, one video."""
    db = session_factory()
    album = Album(id="A1", title="Demo", description="First demo", artwork_url="https://cdn/a1.png", user_id="U1")
    db.add(album)
    db.add(AlbumApiKey(id="K1", album_id="A1", api_key="abc123", usage_count=5, is_active=True))
    db.add(Track(id="T2", title="Second", file_url="https://cdn/t2.mp3", duration=180.5, album_id="A1", user_id="U1"))
    db.add(Track(id="T1", title="First", file_url="https://cdn/t1.mp3", duration=200.0, album_id="A1", user_id="U1"))
    db.add(Video(id="V1", title="Live", file_url="https://cdn/v1.mp4", thumbnail_url="https://cdn/v1.jpg", duration=60.0, user_id="U1"))

    # another artist's catalog, never part of the Demo payload
    db.add(Album(id="A2", title="Other", user_id="U2"))
    db.add(Track(id="T3", title="Elsewhere", file_url="https://cdn/t3.mp3", album_id="A2", user_id="U2"))
    db.add(Video(id="V2", title="Not mine", file_url="https://cdn/v2.mp4", user_id="U2"))
    db.commit()
    db.close()
    return "abc123"


def read_key(session_factory, key_id: str = "K1") -> AlbumApiKey:
    db = session_factory()
    try:
        key = db.query(AlbumApiKey).filter(AlbumApiKey.id == key_id).first()
        if key is not None:
            db.expunge(key)
        return key
    finally:
        db.close()
