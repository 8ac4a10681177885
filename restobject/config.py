# restobject/config.py
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

from .exceptions import ConfigurationError


def _default_headers() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class ClientProfile:
    """
    Settings shared by every object managed through one API.
    Describes where an object's id comes from and how requests are sent.
    Built once and never mutated, so many objects can read it freely.
    """
    id_attribute: str = "id"
    id_header: str = ""
    id_header_is_url: bool = False
    write_returns_object: bool = False
    create_returns_object: bool = False
    copy_keys: Tuple[str, ...] = ()
    timeout: float = 30
    retries: int = 0
    headers: Mapping[str, str] = field(default_factory=_default_headers)
    username: Optional[str] = None
    password: Optional[str] = None
    insecure: bool = False

    def __post_init__(self):
        if not self.id_attribute:
            raise ConfigurationError("id_attribute must not be empty")
        if self.timeout is None or self.timeout <= 0:
            raise ConfigurationError(f"timeout must be > 0, got {self.timeout!r}")
        if self.retries < 0:
            raise ConfigurationError(f"retries must be >= 0, got {self.retries!r}")
        if isinstance(self.copy_keys, str):
            raise ConfigurationError("copy_keys must be a sequence of field names, not a string")

        # Keep first occurrence order, drop duplicates
        object.__setattr__(self, "copy_keys", tuple(dict.fromkeys(self.copy_keys)))
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers or {})))

    @property
    def has_id_fallback(self) -> bool:
        """True when an id can still be learned from a write response"""
        return bool(self.write_returns_object or self.create_returns_object or self.id_header)

    @classmethod
    def from_dict(cls, config: Dict = None) -> "ClientProfile":
        """Build a profile from a plain config dict, defaults filled in"""
        known = {f.name for f in fields(cls)}
        config = {**(config or {})}

        unknown = sorted(set(config) - known)
        if unknown:
            raise ConfigurationError(f"Unknown client settings: {', '.join(unknown)}")

        return cls(**config)
