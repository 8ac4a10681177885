# restobject/state_manager.py
import logging
from typing import List

from .api_object import APIObject
from .exceptions import RollbackError

logger = logging.getLogger(__name__)


class ResourceManager:
    """
    Builds objects on one shared transport and tracks the ones it created,
    so they can be removed again in reverse creation order (LIFO).
    """
    def __init__(self, api_client):
        self.api_client = api_client
        self._resources: List[APIObject] = []

    def new_object(self, get_path: str, post_path: str, put_path: str, delete_path: str,
                   id: str = "", data=None, debug: bool = False) -> APIObject:
        """Construct an object bound to the shared transport (nothing is sent)"""
        return APIObject(self.api_client, get_path, post_path, put_path, delete_path,
                         id=id, data=data, debug=debug)

    def create(self, obj: APIObject) -> APIObject:
        """Create the object on the server, track it for rollback"""
        obj.create_object()
        self._resources.append(obj)
        return obj

    def rollback(self):
        """Delete every tracked object, newest first"""
        errors = []
        for obj in reversed(list(self._resources)):
            try:
                obj.delete_object()
                # Remove from tracking after successful deletion
                self._resources.remove(obj)
            except Exception as e:
                logger.warning("Failed to delete object %s: %s", obj.id, e)
                errors.append(f"Failed to delete {obj.delete_path} (id {obj.id}): {e}")

        if errors:
            raise RollbackError("Rollback incomplete:\n" + "\n".join(errors))

    def get_resources(self) -> List[APIObject]:
        return list(self._resources)

    def clear_resources(self):
        """Forget all tracked objects without deleting them (use with caution)"""
        self._resources.clear()
