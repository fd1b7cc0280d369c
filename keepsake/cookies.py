from __future__ import annotations

import dataclasses
import datetime
import enum
import typing

from keepsake.utils import camel_to_snake

DELIMITER = "::"
CREDENTIALS_SUFFIX = "_credentials"


class _SessionOnly(enum.Enum):
    SESSION_ONLY = "session"

    def __repr__(self) -> str:
        return "SESSION_ONLY"


SESSION_ONLY = _SessionOnly.SESSION_ONLY
"""Cookie expiry marker: no explicit expiry, the browser drops the cookie when its session ends."""

CookieExpiry = typing.Union[datetime.datetime, typing.Literal[_SessionOnly.SESSION_ONLY]]


@dataclasses.dataclass(frozen=True)
class CookieAttributes:
    domain: str | None = None
    expires: CookieExpiry = SESSION_ONLY
    secure: bool = False
    httponly: bool = False
    signed: bool = False
    path: str = "/"
    samesite: typing.Literal["lax", "strict", "none"] = "lax"

    @property
    def is_session_only(self) -> bool:
        return self.expires is SESSION_ONLY


class CookieCredentials(typing.NamedTuple):
    """Decoded credentials cookie.

    `expires_at` is carried for completeness only, restoration never reads it.
    """

    persistence_token: str
    record_key: str | None = None
    expires_at: str | None = None


def format_timestamp(value: datetime.datetime) -> str:
    return value.isoformat(timespec="seconds")


def encode_cookie_value(
    persistence_token: str,
    record_key: typing.Any,
    expires_at: datetime.datetime | None = None,
) -> str:
    """Build "token::key" or, for remembered sessions, "token::key::expires_at"."""
    fields = [persistence_token, "" if record_key is None else str(record_key)]
    if expires_at is not None:
        fields.append(format_timestamp(expires_at))
    return DELIMITER.join(fields)


def parse_cookie_value(value: str | None) -> CookieCredentials | None:
    """
    Decode a raw credentials cookie.

    Returns None for a missing value, for a value with fewer than two fields
    and for a value with an empty persistence token. Never raises.
    """
    if not value:
        return None

    fields = value.split(DELIMITER)
    if len(fields) < 2:
        return None

    persistence_token, record_key, *rest = fields
    if not persistence_token:
        return None
    return CookieCredentials(persistence_token, record_key or None, rest[0] if rest else None)


def guess_cookie_key(class_name: str) -> str:
    """Derive the default cookie key from a session class name: UserSession -> user_credentials."""
    subject = class_name.removesuffix("Session") or class_name
    return camel_to_snake(subject) + CREDENTIALS_SUFFIX


def build_cookie_key(base_key: str, id: str | None = None) -> str:
    """Prefix the base key with a session id so that several session types can coexist."""
    if id:
        return f"{id}_{base_key}"
    return base_key
