from __future__ import annotations

import base64
import binascii
import hashlib
import json
import logging
import os
import stat
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

from cryptography.fernet import Fernet, InvalidToken

from . import __version__
from .errors import ConfigError

logger = logging.getLogger(__name__)

NRCLIENT_DIR = os.path.expanduser(os.getenv("NRCLIENT_HOME", "~/.nrclient"))
CONFIG_PATH = os.path.join(NRCLIENT_DIR, "config.json")

DEFAULT_USER_AGENT = f"nrclient/{__version__}"

REGIONS: dict[str, dict[str, str]] = {
    "US": {
        "rest": "https://api.newrelic.com/v2",
        "nerdgraph": "https://api.newrelic.com/graphql",
    },
    "EU": {
        "rest": "https://api.eu.newrelic.com/v2",
        "nerdgraph": "https://api.eu.newrelic.com/graphql",
    },
}

_SENSITIVE_KEYS = ("personal_api_key", "admin_api_key")
_FERNET_SALT = b"nrclient-config"
_cached_cipher: Fernet | None = None
_cached_cipher_key: str | None = None


class EncryptedConfigError(ConfigError):
    """Raised when encrypted configuration cannot be decrypted."""


def normalize_region(region: str | None) -> str:
    value = (region or "US").strip().upper()
    if value not in REGIONS:
        raise ConfigError(f"Unknown region '{region}'; expected one of {', '.join(REGIONS)}")
    return value


@dataclass(frozen=True)
class ClientConfig:
    """Connection settings handed to every resource client.

    Attributes:
        personal_api_key: User key used for NerdGraph and, without an admin key, REST.
        admin_api_key: Optional admin key used for REST calls when present.
        region: ``US`` or ``EU``; selects the default endpoints.
        user_agent: Value sent in the ``User-Agent`` header.
        timeout: Per-request timeout in seconds.
        max_retries: Retries for transport errors and retryable statuses.
        base_url: Explicit REST base URL overriding the region default.
        nerdgraph_url: Explicit NerdGraph endpoint overriding the region default.
    """

    personal_api_key: str | None = None
    admin_api_key: str | None = None
    region: str = "US"
    user_agent: str = DEFAULT_USER_AGENT
    timeout: float = 60.0
    max_retries: int = 2
    base_url: str | None = None
    nerdgraph_url: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "region", normalize_region(self.region))

    def rest_url(self) -> str:
        return (self.base_url or REGIONS[self.region]["rest"]).rstrip("/")

    def nerdgraph_endpoint(self) -> str:
        return self.nerdgraph_url or REGIONS[self.region]["nerdgraph"]

    def rest_headers(self) -> dict[str, str]:
        headers = {"User-Agent": self.user_agent}
        if self.admin_api_key:
            headers["X-Api-Key"] = self.admin_api_key
        elif self.personal_api_key:
            headers["Api-Key"] = self.personal_api_key
        else:
            raise ConfigError("An admin or personal API key is required for REST calls.")
        return headers

    def nerdgraph_headers(self) -> dict[str, str]:
        if not self.personal_api_key:
            raise ConfigError("A personal API key is required for NerdGraph calls.")
        return {"User-Agent": self.user_agent, "Api-Key": self.personal_api_key}


def _derive_fernet_key(raw: str) -> bytes | None:
    """Return a urlsafe base64 Fernet key derived from ``raw``."""

    if not raw:
        return None

    normalized = raw.strip().encode("utf-8")
    if not normalized:
        return None

    try:
        decoded = base64.urlsafe_b64decode(normalized)
    except (binascii.Error, ValueError):
        decoded = b""

    if len(decoded) == 32:
        return normalized

    return base64.urlsafe_b64encode(
        hashlib.pbkdf2_hmac("sha256", normalized, _FERNET_SALT, 390_000, dklen=32)
    )


def _get_cipher() -> Fernet | None:
    global _cached_cipher, _cached_cipher_key

    key = os.getenv("NRCLIENT_CONFIG_ENCRYPTION_KEY")
    if key != _cached_cipher_key:
        _cached_cipher = None
        _cached_cipher_key = key

    if not key:
        return None

    if _cached_cipher is not None:
        return _cached_cipher

    derived = _derive_fernet_key(key)
    if not derived:
        logger.warning(
            "NRCLIENT_CONFIG_ENCRYPTION_KEY is invalid; expected a Fernet key or passphrase."
        )
        return None

    _cached_cipher = Fernet(derived)
    return _cached_cipher


def encrypt_field(value: str | None) -> str | None:
    """Encrypt ``value`` when an encryption key is configured."""

    if value is None or value == "":
        return value

    cipher = _get_cipher()
    if cipher is None:
        return value

    token = cipher.encrypt(value.encode("utf-8"))
    return f"enc:{token.decode('utf-8')}"


def decrypt_field(value: str | None) -> str | None:
    """Decrypt ``value`` produced by :func:`encrypt_field`."""

    if value is None or value == "":
        return value

    if not value.startswith("enc:"):
        return value

    cipher = _get_cipher()
    if cipher is None:
        raise EncryptedConfigError(
            "Encrypted nrclient configuration detected but NRCLIENT_CONFIG_ENCRYPTION_KEY is not set."
        )

    try:
        decrypted = cipher.decrypt(value[4:].encode("utf-8"))
    except InvalidToken as exc:
        raise EncryptedConfigError(
            "Unable to decrypt nrclient configuration; verify encryption key."
        ) from exc
    return decrypted.decode("utf-8")


def _secure_path(path: Path) -> None:
    if not path.exists():
        return

    try:
        if os.name == "nt":
            os.chmod(path, stat.S_IREAD | stat.S_IWRITE)
        else:
            mode = stat.S_IMODE(path.stat().st_mode)
            if mode & (stat.S_IRWXG | stat.S_IRWXO):
                logger.warning("Adjusted permissions for %s to 0o600", path)
            path.chmod(0o600)
    except PermissionError as exc:
        logger.warning("Unable to enforce secure permissions for %s: %s", path, exc)


def _encrypt_profile_dict(profile: dict[str, Any]) -> dict[str, Any]:
    payload = dict(profile)
    for key in _SENSITIVE_KEYS:
        value = payload.get(key)
        if isinstance(value, str):
            payload[key] = encrypt_field(value)
    return payload


def _decrypt_profile_dict(profile: dict[str, Any]) -> dict[str, Any]:
    payload = dict(profile)
    for key in _SENSITIVE_KEYS:
        value = payload.get(key)
        if isinstance(value, str):
            payload[key] = decrypt_field(value)
    return payload


@dataclass
class Profile:
    name: str
    personal_api_key: str | None = None
    admin_api_key: str | None = None
    region: str = "US"
    account_id: int | None = None

    def to_client_config(self, **overrides: Any) -> ClientConfig:
        values: dict[str, Any] = {
            "personal_api_key": self.personal_api_key,
            "admin_api_key": self.admin_api_key,
            "region": self.region,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return ClientConfig(**values)


_PROFILE_FIELDS = frozenset(f.name for f in fields(Profile))


@dataclass
class ConfigData:
    default_profile: str | None = None
    profiles: dict[str, Profile] = field(default_factory=dict)


class ConfigStore:
    def __init__(self, path: str | os.PathLike[str] | None = None) -> None:
        self.path = Path(path) if path else Path(CONFIG_PATH)

    def _ensure(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read(self) -> dict[str, Any]:
        self._ensure()
        if not self.path.exists():
            return {"default": None, "profiles": {}}
        _secure_path(self.path)
        with self.path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        raw["profiles"] = {
            name: _decrypt_profile_dict(profile)
            for name, profile in raw.get("profiles", {}).items()
        }
        return raw

    def _write(self, data: dict[str, Any]) -> None:
        self._ensure()
        tmp = self.path.with_suffix(".tmp")
        payload = dict(data)
        payload["profiles"] = {
            name: _encrypt_profile_dict(
                asdict(profile) if isinstance(profile, Profile) else profile
            )
            for name, profile in payload.get("profiles", {}).items()
        }
        with tmp.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2)
        tmp.replace(self.path)
        _secure_path(self.path)

    def load(self) -> ConfigData:
        raw = self._read()
        profs = {
            name: Profile(
                name=name,
                **{k: v for k, v in data.items() if k != "name" and k in _PROFILE_FIELDS},
            )
            for name, data in raw.get("profiles", {}).items()
        }
        return ConfigData(default_profile=raw.get("default"), profiles=profs)

    def save(self, cfg: ConfigData) -> None:
        self._write({"default": cfg.default_profile, "profiles": cfg.profiles})

    def add_or_update_profile(self, profile: Profile, *, set_default: bool = False) -> ConfigData:
        """Persist ``profile`` and optionally set it as default."""

        profile.region = normalize_region(profile.region)
        cfg = self.load()
        cfg.profiles[profile.name] = profile
        if set_default or not cfg.default_profile:
            cfg.default_profile = profile.name
        self.save(cfg)
        return cfg

    def set_default_profile(self, name: str) -> ConfigData:
        """Mark the profile ``name`` as the default profile."""

        cfg = self.load()
        if name not in cfg.profiles:
            raise KeyError(f"Profile '{name}' not found")
        cfg.default_profile = name
        self.save(cfg)
        return cfg

    def delete_profile(self, name: str) -> ConfigData:
        cfg = self.load()
        if name not in cfg.profiles:
            raise KeyError(f"Profile '{name}' not found")
        del cfg.profiles[name]
        if cfg.default_profile == name:
            cfg.default_profile = None
        self.save(cfg)
        return cfg


__all__ = [
    "CONFIG_PATH",
    "ClientConfig",
    "ConfigData",
    "ConfigStore",
    "DEFAULT_USER_AGENT",
    "EncryptedConfigError",
    "Profile",
    "REGIONS",
    "decrypt_field",
    "encrypt_field",
    "normalize_region",
]
