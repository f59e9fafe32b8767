from sqlalchemy import Column, DateTime, Float, ForeignKey, String, func
from sqlalchemy.orm import relationship

from db_base import Base
from utils import new_id


class Track(Base):
    __tablename__ = "tracks"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String, nullable=False)
    file_url = Column(String, nullable=False)
    duration = Column(Float, nullable=True)

    album_id = Column(
        String(36), ForeignKey("albums.id", ondelete="CASCADE"), index=True, nullable=True
    )
    user_id = Column(String(36), index=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    album = relationship("Album", back_populates="tracks")
