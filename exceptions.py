class GatewayError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str = None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class BadRequest(GatewayError):
    status_code = 400
    message = "API key is required"


class Unauthorized(GatewayError):
    status_code = 401
    message = "Invalid or inactive API key"


class StoreError(Exception):
    """Raised by an AlbumStore when the backing store rejects or fails a call."""


class KeyConflict(StoreError):
    """The album already has an active API key."""
