# restobject/api_object.py
import json
import logging
import math
from typing import Any, Dict, List, Union

from .exceptions import ConfigurationError, IdentityResolutionError, SerializationError

logger = logging.getLogger(__name__)

JSONValue = Union[None, bool, int, float, str, List[Any], Dict[str, Any]]


def coerce_id(value: JSONValue) -> str:
    """
    Turn any JSON value into the id string used in paths.

    strings pass through, booleans become "true"/"false", integers (and floats
    holding an integer below 1e21) become plain digits, other floats use their
    shortest repr, null becomes "" (no id), arrays and objects become compact JSON.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return json.dumps(value, separators=(",", ":"), sort_keys=True)


def id_from_header(value: str, is_url: bool) -> str:
    """Take the whole header value, or the last path segment when it is a URL"""
    if not is_url:
        return value
    return value.rstrip("/").split("/")[-1]


def _decode_object(payload: Union[str, Dict], what: str) -> Dict[str, Any]:
    if isinstance(payload, dict):
        return dict(payload)
    try:
        decoded = json.loads(payload)
    except ValueError as e:
        raise SerializationError(f"Could not parse {what} as JSON: {e}") from e
    if not isinstance(decoded, dict):
        raise SerializationError(f"Expected a JSON object in {what}, got {type(decoded).__name__}")
    return decoded


class APIObject:
    """
    One RESTful object managed through an API.

    `data` is what the caller wants the object to look like; `api_data` is
    what the server last reported. The object's id comes from the constructor,
    from `id_attribute` in either of those, or from `id_header` after a POST.
    Once known, the id is used in every `{id}` path template.
    """

    def __init__(self, api_client, get_path: str, post_path: str, put_path: str,
                 delete_path: str, id: str = "", data: Union[str, Dict, None] = None,
                 debug: bool = False):
        self.api_client = api_client
        self.get_path = get_path
        self.post_path = post_path
        self.put_path = put_path
        self.delete_path = delete_path
        self.debug = debug
        self.id = id or ""
        self.data: Dict[str, Any] = {}
        self.api_data: Dict[str, Any] = {}

        if debug:
            logger.debug("Constructing debug APIObject with id '%s'", self.id)

        for verb, path in (("GET", get_path), ("POST", post_path),
                           ("PUT", put_path), ("DELETE", delete_path)):
            if not path:
                raise ConfigurationError(f"No {verb} path passed to APIObject")
        if data == "":
            raise ConfigurationError("No data passed to APIObject")

        self.data = _decode_object("{}" if data is None else data, "object data")

        # Opportunistically take the id from the data, otherwise learn it later
        if not self.id:
            profile = self.profile
            if profile.id_attribute in self.data:
                self.id = coerce_id(self.data[profile.id_attribute])
            if not self.id and not profile.has_id_fallback:
                raise IdentityResolutionError(
                    f"Provided data does not have '{profile.id_attribute}' attribute for the "
                    "object's id and the client is not configured to read the object or its id "
                    "from a POST response. Without an id, the object cannot be managed."
                )

        if debug:
            logger.debug("Constructed object:\n%s", self.to_string())

    @property
    def profile(self):
        return self.api_client.profile

    def to_string(self) -> str:
        """Dump the important bits about this object, for debugging"""
        lines = [
            f"id: {self.id}",
            f"get_path: {self.get_path}",
            f"post_path: {self.post_path}",
            f"put_path: {self.put_path}",
            f"delete_path: {self.delete_path}",
            f"debug: {str(self.debug).lower()}",
            f"data: {json.dumps(self.data, indent=2, sort_keys=True, default=repr)}",
            f"api_data: {json.dumps(self.api_data, indent=2, sort_keys=True, default=repr)}",
        ]
        return "\n".join(lines) + "\n"

    def __repr__(self):
        return f"<APIObject id={self.id!r} get_path={self.get_path!r}>"

    def _path(self, template: str) -> str:
        return template.replace("{id}", self.id)

    def _encode_data(self) -> str:
        try:
            return json.dumps(self.data)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Could not serialize object data: {e}") from e

    def _log_headers(self, headers: Dict[str, List[str]]):
        if not self.debug:
            return
        logger.debug("Response headers:")
        for name, values in headers.items():
            for value in values:
                logger.debug("  %s: %s", name, value)

    def update_state(self, state: Union[str, Dict, None]):
        """
        Merge a server response into this object.
        Replaces api_data, learns the id if still unknown, then copies copy_keys into data.
        """
        profile = self.profile
        if self.debug:
            logger.debug("Updating API object state to %r", state)

        api_data = self.api_data
        if state is not None and state != "":
            api_data = _decode_object(state, "response body")

        # Resolve the id before touching anything so a failed sync leaves us unchanged
        if not self.id:
            found = coerce_id(api_data.get(profile.id_attribute))
            if not found:
                keys = "".join(f"\n  {k}" for k in api_data) or " (none)"
                raise IdentityResolutionError(
                    f"'{profile.id_attribute}' is not in the data presented nor passed in the "
                    f"constructor. List of keys available:{keys}"
                )
            self.id = found
            logger.info("Updating object id (unset) to '%s'", self.id)
        elif self.debug:
            logger.debug("Not updating id. It is already set to '%s'", self.id)

        self.api_data = api_data

        if profile.copy_keys and self.api_data:
            for key in profile.copy_keys:
                if key not in self.api_data:
                    continue
                if self.debug:
                    logger.debug("Copying key '%s' from api_data (%r) to data (%r)",
                                 key, self.api_data[key], self.data.get(key))
                self.data[key] = self.api_data[key]
        elif self.debug:
            logger.debug("copy_keys or api_data is empty - not attempting to copy data")

        if self.debug:
            logger.debug("Final object after synchronization of state:\n%s", self.to_string())

    def create_object(self):
        """POST data, learn the id, then sync from the response or a fresh GET"""
        profile = self.profile

        # The constructor checks this too; the id may have been cleared since
        if not self.id and not profile.has_id_fallback:
            raise IdentityResolutionError(
                "Provided object does not have an id set and the client is not configured to "
                "read the object after a POST or PUT response, possibly after retrieving the id "
                "from a header of the POST response. Without an id, the object cannot be managed."
            )

        res_headers, res_body = self.api_client.send_request(
            "POST", self._path(self.post_path), self._encode_data())

        if profile.id_header:
            header_id = ""
            wanted = profile.id_header.lower()
            for name, values in res_headers.items():
                if name.lower() != wanted:
                    continue
                for value in values:
                    header_id = id_from_header(value, profile.id_header_is_url)
                    logger.debug("Found id '%s' in header '%s'", header_id, name)

            if header_id:
                self.id = header_id
                logger.info("Setting object id to '%s' from header '%s'", header_id, profile.id_header)
            else:
                logger.info("id_header '%s' was empty or not found", profile.id_header)

        if profile.write_returns_object or profile.create_returns_object:
            if self.debug:
                logger.debug("Parsing response from POST (write_returns_object=%s, create_returns_object=%s)",
                             profile.write_returns_object, profile.create_returns_object)
            self.update_state(res_body)
            if not self.id:
                raise IdentityResolutionError(
                    "Internal validation failed. Object id is not set, but *may* have been created.")
        else:
            if self.debug:
                logger.debug("Requesting created object from API")
            self.read_object()

    def read_object(self):
        if not self.id:
            raise IdentityResolutionError("Cannot read an object unless the id has been set.")

        res_headers, res_body = self.api_client.send_request("GET", self._path(self.get_path))
        self._log_headers(res_headers)
        self.update_state(res_body)

    def update_object(self):
        if not self.id:
            raise IdentityResolutionError("Cannot update an object unless the id has been set.")

        res_headers, res_body = self.api_client.send_request(
            "PUT", self._path(self.put_path), self._encode_data())
        self._log_headers(res_headers)

        if self.profile.write_returns_object:
            if self.debug:
                logger.debug("Parsing response from PUT (write_returns_object=true)")
            self.update_state(res_body)
        else:
            if self.debug:
                logger.debug("Requesting updated object from API (write_returns_object=false)")
            self.read_object()

    def delete_object(self):
        if not self.id:
            logger.warning("Attempting to delete an object that has no id set. Assuming this is OK.")
            return

        self.api_client.send_request("DELETE", self._path(self.delete_path))
