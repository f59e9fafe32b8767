from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class AlbumCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    artwork_url: Optional[str] = None
    artist_name: Optional[str] = None
    artist_bio: Optional[str] = None


class AlbumOut(BaseModel):
    id: str
    title: str
    description: Optional[str] = None
    artwork_url: Optional[str] = None
    artist_name: Optional[str] = None
    artist_bio: Optional[str] = None
    created_at: Optional[datetime] = None


class TrackCreate(BaseModel):
    title: str = Field(..., min_length=1)
    file_url: str
    duration: Optional[float] = Field(None, ge=0)


class TrackOut(BaseModel):
    id: str
    title: str
    file_url: str
    duration: Optional[float] = None


class VideoCreate(BaseModel):
    title: str = Field(..., min_length=1)
    file_url: str
    thumbnail_url: Optional[str] = None
    duration: Optional[float] = Field(None, ge=0)


class VideoOut(BaseModel):
    id: str
    title: str
    file_url: str
    thumbnail_url: Optional[str] = None
    duration: Optional[float] = None


class ApiKeyOut(BaseModel):
    id: str
    album_id: str
    album_title: Optional[str] = None
    api_key: str
    is_active: bool
    usage_count: int
    last_used_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ApiKeyStatus(BaseModel):
    is_active: bool


class AlbumCreated(BaseModel):
    album: AlbumOut
    api_key: ApiKeyOut
