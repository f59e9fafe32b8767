from models.album import Album
from models.api_key import AlbumApiKey
from models.track import Track
from models.video import Video

__all__ = ["Album", "AlbumApiKey", "Track", "Video"]
