from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, func, text
from sqlalchemy.orm import relationship

from db_base import Base
from utils import new_id


class AlbumApiKey(Base):
    __tablename__ = "album_api_keys"

    id = Column(String(36), primary_key=True, default=new_id)
    album_id = Column(
        String(36), ForeignKey("albums.id", ondelete="CASCADE"), index=True, nullable=False
    )
    api_key = Column(String(64), unique=True, index=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    usage_count = Column(Integer, nullable=False, default=0)
    last_used_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    album = relationship("Album", back_populates="api_keys")

    # at most one active key per album; revoked keys keep their history
    __table_args__ = (
        Index(
            "uq_album_api_keys_active_album",
            "album_id",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )
