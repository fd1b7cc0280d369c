from __future__ import annotations

import typing
from starlette.authentication import AuthCredentials, AuthenticationBackend, BaseUser
from starlette.requests import HTTPConnection
from starlette.responses import Response

from keepsake.contracts import RecordStore
from keepsake.exceptions import ImproperlyConfigured
from keepsake.jars import RequestCookieJar, create_jar
from keepsake.sessions import CookieSession, check_signing_support

SCOPE_KEY = "keepsake.session"


class LoginScopes:
    AUTHENTICATED = "authenticated"
    REMEMBERED = "login:remembered"


class RememberMeBackend(AuthenticationBackend):
    """
    Authenticate requests using the credentials cookie.

    The restored session is stored in scope under SCOPE_KEY so that views can
    refresh or destroy the cookie later.
    """

    def __init__(
        self,
        session_class: type[CookieSession],
        store: RecordStore,
        secret_key: str | bytes | None = None,
        cookie_domain: str | None = None,
        session_options: typing.Mapping[str, typing.Any] | None = None,
    ) -> None:
        if session_class.jar_class.supports_signing and secret_key is None:
            raise ImproperlyConfigured(
                f"{session_class.__name__} uses {session_class.jar_class.__name__} which requires a secret key."
            )
        self.session_options = dict(session_options or {})
        check_signing_support(
            session_class.jar_class,
            session_class.requested_signing(self.session_options.get("overrides")),
        )
        self.session_class = session_class
        self.store = store
        self.secret_key = secret_key
        self.cookie_domain = cookie_domain

    def create_session(self, conn: HTTPConnection) -> CookieSession:
        jar = create_jar(
            typing.cast(type[RequestCookieJar], self.session_class.jar_class),
            conn,
            self.secret_key,
        )
        session = self.session_class(jar, self.store, cookie_domain=self.cookie_domain, **self.session_options)
        conn.scope[SCOPE_KEY] = session
        return session

    async def authenticate(self, conn: HTTPConnection) -> tuple[AuthCredentials, BaseUser] | None:
        session = self.create_session(conn)
        outcome = await session.persist()
        if not outcome:
            return None
        return AuthCredentials([LoginScopes.AUTHENTICATED, LoginScopes.REMEMBERED]), typing.cast(
            BaseUser, outcome.record
        )


def get_cookie_session(conn: HTTPConnection) -> CookieSession | None:
    return conn.scope.get(SCOPE_KEY)


def _flush(response: Response, session: CookieSession) -> Response:
    jar = session.jar
    if not isinstance(jar, RequestCookieJar):
        raise TypeError(f"Cannot write cookies of {type(jar).__name__} to a response.")
    return jar.apply(response)


def remember(response: Response, session: CookieSession) -> Response:
    """Write the credentials cookie of an authenticated session to the response."""
    session.save_cookie()
    return _flush(response, session)


def forget(response: Response, session: CookieSession) -> Response:
    """Delete the credentials cookie."""
    session.logout()
    return _flush(response, session)
