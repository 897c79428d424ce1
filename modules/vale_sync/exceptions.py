# =========================================================================
# CUSTOM EXCEPTIONS
# =========================================================================

class ValeSyncError(Exception):
    """Base exception for Vale sync errors"""
    pass


class ConfigError(ValeSyncError):
    """Configuration is missing or invalid"""
    pass


class NetworkError(ValeSyncError):
    """Request to the Vale API failed.

    str(error) is the human-readable message stores surface to callers.
    """
    pass


class Unauthorized(NetworkError):
    """API answered 401 - credential missing, invalid or expired"""

    def __init__(self, message: str = "Authentication failed or token expired."):
        super().__init__(message)


class ServerError(NetworkError):
    """API answered with a non-2xx status other than 401"""

    def __init__(self, status_code: int, reason: str = ''):
        self.status_code = status_code
        self.reason = reason
        if reason:
            super().__init__(f"Server error ({status_code}): {reason}")
        else:
            super().__init__(f"Server error ({status_code})")


class DecodingError(NetworkError):
    """Response body could not be turned into the expected model"""

    def __init__(self, message: str = "Failed to decode server response."):
        super().__init__(message)


class TransportError(NetworkError):
    """Connection, DNS or timeout failure before a response arrived"""
    pass


class HubSpotError(ValeSyncError):
    """HubSpot push failed"""
    pass
