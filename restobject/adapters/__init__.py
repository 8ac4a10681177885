# restobject/adapters/__init__.py
from .rest_adapter import RESTAdapter

__all__ = ["RESTAdapter"]
