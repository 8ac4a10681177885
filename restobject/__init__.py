# restobject/__init__.py
from .api_object import APIObject, coerce_id
from .config import ClientProfile
from .state_manager import ResourceManager
from .exceptions import (
    RestObjectError,
    ConfigurationError,
    IdentityResolutionError,
    SerializationError,
    TransportError,
    TransportTimeoutError,
    HTTPStatusError,
    RollbackError,
)

__version__ = "0.1.0"
__all__ = [
    "APIObject",
    "coerce_id",
    "ClientProfile",
    "ResourceManager",
    "RestObjectError",
    "ConfigurationError",
    "IdentityResolutionError",
    "SerializationError",
    "TransportError",
    "TransportTimeoutError",
    "HTTPStatusError",
    "RollbackError",
]
