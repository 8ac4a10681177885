# restobject/adapters/rest_adapter.py
import logging
from typing import Dict, List, Optional, Tuple

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..config import ClientProfile
from ..exceptions import (
    ConfigurationError,
    HTTPStatusError,
    SerializationError,
    TransportError,
    TransportTimeoutError,
)

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")


def get_retry_strategy(retries: int) -> Retry:
    """Retry connection failures only; statuses and read errors surface at once"""
    return Retry(
        total=retries,
        connect=retries,
        read=False,
        status=0,
        other=0,
        allowed_methods=None,
        raise_on_status=False,
    )


def mount_retry_adapter(session: requests.Session, retries: int) -> None:
    """Mount a retry-enabled HTTPAdapter on a requests.Session"""
    adapter = HTTPAdapter(max_retries=get_retry_strategy(retries))
    session.mount("https://", adapter)
    session.mount("http://", adapter)


class RESTAdapter:
    """
    Transport for managed objects: one blocking request at a time,
    with the profile's timeout, auth, headers and retry policy.

    Headers, auth and TLS verification travel with each request; the session
    only gains the retry adapter, so one adapter (or a caller's session) can
    be shared by many objects and threads.
    """

    def __init__(self, base_url: str, profile: Optional[ClientProfile] = None,
                 config: Dict = None, session: Optional[requests.Session] = None):
        if not base_url:
            raise ConfigurationError("No base URL passed to RESTAdapter")
        if profile is not None and config is not None:
            raise ConfigurationError("Pass either a ClientProfile or a config dict, not both")

        self.base_url = base_url.rstrip("/")
        self.profile = profile or ClientProfile.from_dict(config)

        self.headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
            **self.profile.headers,
        }
        self.auth = None
        if self.profile.username:
            self.auth = (self.profile.username, self.profile.password or "")
        self.verify = not self.profile.insecure

        self.session = session or requests.Session()
        mount_retry_adapter(self.session, self.profile.retries)

    def send_request(self, method: str, path: str, body: str = "") -> Tuple[Dict[str, List[str]], str]:
        """
        Send one request and wait for the answer.
        Returns: (headers, body) where headers maps each name to all its values
        """
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ConfigurationError(f"Unsupported HTTP method: {method}")

        url = f"{self.base_url}{path}"
        timeout = self.profile.timeout
        logger.debug("Request: %s %s body=%r", method, url, body)

        try:
            response = self.session.request(
                method,
                url,
                data=body.encode("utf-8") if body else None,
                headers=self.headers,
                auth=self.auth,
                verify=self.verify,
                timeout=timeout,
            )
        except requests.exceptions.Timeout as e:
            raise TransportTimeoutError(f"{method} {url} timed out after {timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e

        raw_headers = response.raw.headers
        headers = {name: raw_headers.getlist(name) for name in raw_headers}

        # JSON bodies are UTF-8 whatever charset a text/* Content-Type implies
        try:
            res_body = response.content.decode("utf-8")
        except UnicodeDecodeError as e:
            if response.status_code < 400:
                raise SerializationError(f"{method} {url} returned a body that is not UTF-8: {e}") from e
            res_body = response.content.decode("utf-8", errors="replace")

        logger.debug("Response: %s %s -> %s headers=%s body=%r",
                     method, url, response.status_code, headers, res_body)

        if response.status_code >= 400:
            raise HTTPStatusError(method, url, response.status_code, res_body)

        return headers, res_body

    def close(self):
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
