from __future__ import annotations

import itsdangerous
import typing

SALT = "keepsake.cookie"


def _signer(secret_key: str | bytes) -> itsdangerous.Signer:
    return itsdangerous.Signer(secret_key, salt=SALT)


def sign_value(secret_key: str | bytes, value: str) -> str:
    """Attach a signature to the cookie value."""
    return _signer(secret_key).sign(value).decode()


def unsign_value(secret_key: str | bytes, signed_value: str) -> str:
    """
    Verify signature and return the original value.

    Raises itsdangerous.BadSignature exception.
    """
    return _signer(secret_key).unsign(signed_value).decode()


def safe_unsign_value(secret_key: str | bytes, signed_value: str) -> tuple[bool, typing.Optional[str]]:
    """
    Safely unsign value.

    Will not raise itsdangerous.BadSignature. Returns two-tuple: operation
    status and unsigned value.
    """
    try:
        return True, unsign_value(secret_key, signed_value)
    except itsdangerous.BadSignature:
        return False, None
