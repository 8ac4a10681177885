# restobject/exceptions.py

class RestObjectError(Exception):
    """Base exception for restobject operations"""
    pass

class ConfigurationError(RestObjectError):
    """Raised when an object or client is built from unusable settings"""
    pass

class IdentityResolutionError(RestObjectError):
    """Raised when no channel yields an id for an object that needs one"""
    pass

class SerializationError(RestObjectError):
    """Raised when a request or response body is not valid JSON"""
    pass

class TransportError(RestObjectError):
    """Raised when a request cannot be completed"""
    pass

class TransportTimeoutError(TransportError):
    """Raised when a request does not complete within the configured timeout"""
    pass

class HTTPStatusError(TransportError):
    """Raised when the server answers with a status of 400 or above"""

    def __init__(self, method: str, url: str, status_code: int, body: str = ""):
        self.method = method
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(f"{method} {url} failed: {status_code} - {body}")

class RollbackError(RestObjectError):
    """Raised when rollback operations fail"""
    pass
