from sqlalchemy import Column, DateTime, Float, String, func

from db_base import Base
from utils import new_id


class Video(Base):
    __tablename__ = "videos"

    id = Column(String(36), primary_key=True, default=new_id)
    title = Column(String, nullable=False)
    file_url = Column(String, nullable=False)
    thumbnail_url = Column(String, nullable=True)
    duration = Column(Float, nullable=True)

    # videos hang off the artist account, not an album
    user_id = Column(String(36), index=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
