from sqlalchemy import Column, DateTime, String, Text, func
from sqlalchemy.orm import relationship

from db_base import Base
from utils import new_id


class Album(Base):
    __tablename__ = "albums"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    artwork_url = Column(String, nullable=True)
    artist_name = Column(String, nullable=True)
    artist_bio = Column(Text, nullable=True)

    # accounts live with the external auth provider, so no FK here
    user_id = Column(String(36), index=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    tracks = relationship("Track", back_populates="album", cascade="all, delete-orphan")
    api_keys = relationship("AlbumApiKey", back_populates="album", cascade="all, delete-orphan")
