from __future__ import annotations

import dataclasses
import logging
import typing
from starlette.requests import HTTPConnection
from starlette.responses import Response

from keepsake.cookies import CookieAttributes
from keepsake.exceptions import ImproperlyConfigured
from keepsake.signing import safe_unsign_value, sign_value

logger = logging.getLogger(__name__)


@dataclasses.dataclass
class PendingCookie:
    """A cookie change waiting to be written to the response. value=None means deletion."""

    name: str
    value: str | None
    attributes: CookieAttributes

    @property
    def is_deletion(self) -> bool:
        return self.value is None


class RequestCookieJar:
    """
    Cookie jar backed by the request cookies.

    Reads see writes made earlier in the same request. Writes and deletes are
    queued and sent to the client by `apply`.
    """

    supports_signing: typing.ClassVar[bool] = False

    def __init__(self, connection: HTTPConnection) -> None:
        self._cookies: dict[str, str] = dict(connection.cookies)
        self._pending: dict[str, PendingCookie] = {}

    @property
    def pending(self) -> list[PendingCookie]:
        return list(self._pending.values())

    def read(self, name: str, signed: bool = False) -> str | None:
        if signed:
            raise ImproperlyConfigured(f"Signed cookies not supported with {type(self).__name__}.")
        return self._cookies.get(name)

    def write(self, name: str, value: str, attributes: CookieAttributes) -> None:
        if attributes.signed:
            raise ImproperlyConfigured(f"Signed cookies not supported with {type(self).__name__}.")
        self._store(name, value, attributes)

    def delete(self, name: str, domain: str | None = None) -> None:
        self._cookies.pop(name, None)
        self._pending[name] = PendingCookie(name=name, value=None, attributes=CookieAttributes(domain=domain))

    def _store(self, name: str, value: str, attributes: CookieAttributes) -> None:
        self._cookies[name] = value
        self._pending[name] = PendingCookie(name=name, value=value, attributes=attributes)

    def apply(self, response: Response) -> Response:
        """Write all queued cookie changes to the response."""
        for cookie in self._pending.values():
            attributes = cookie.attributes
            if cookie.value is None:
                response.delete_cookie(
                    cookie.name,
                    path=attributes.path,
                    domain=attributes.domain,
                    samesite=attributes.samesite,
                )
            else:
                response.set_cookie(
                    cookie.name,
                    cookie.value,
                    expires=None if attributes.is_session_only else attributes.expires,  # type: ignore[arg-type]
                    path=attributes.path,
                    domain=attributes.domain,
                    secure=attributes.secure,
                    httponly=attributes.httponly,
                    samesite=attributes.samesite,
                )
        self._pending.clear()
        return response

    def __contains__(self, name: str) -> bool:
        return name in self._cookies


class SignedCookieJar(RequestCookieJar):
    """Cookie jar that can also sign cookie values and verify them on read."""

    supports_signing = True

    def __init__(self, connection: HTTPConnection, secret_key: str | bytes) -> None:
        super().__init__(connection)
        self.secret_key = secret_key

    def read(self, name: str, signed: bool = False) -> str | None:
        value = self._cookies.get(name)
        if not signed or value is None:
            return value

        ok, unsigned = safe_unsign_value(self.secret_key, value)
        if not ok:
            logger.debug("Cookie %s has an invalid signature, ignoring.", name)
        return unsigned

    def write(self, name: str, value: str, attributes: CookieAttributes) -> None:
        if attributes.signed:
            value = sign_value(self.secret_key, value)
        self._store(name, value, attributes)


def create_jar(
    jar_class: type[RequestCookieJar],
    connection: HTTPConnection,
    secret_key: str | bytes | None = None,
) -> RequestCookieJar:
    if jar_class.supports_signing:
        if secret_key is None:
            raise ImproperlyConfigured(f"{jar_class.__name__} requires a secret key.")
        return jar_class(connection, secret_key)  # type: ignore[call-arg]
    return jar_class(connection)
