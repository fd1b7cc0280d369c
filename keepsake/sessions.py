from __future__ import annotations

import datetime
import logging
import typing

from keepsake.config import CookieConfig, CookieOverrides
from keepsake.contracts import CookieJar, Record, RecordStore
from keepsake.cookies import (
    SESSION_ONLY,
    CookieAttributes,
    build_cookie_key,
    encode_cookie_value,
    guess_cookie_key,
    parse_cookie_value,
)
from keepsake.exceptions import ImproperlyConfigured, KeepsakeError
from keepsake.jars import RequestCookieJar
from keepsake.stores import PERSISTENCE_TOKEN
from keepsake.utils import is_truthy, run_async

logger = logging.getLogger(__name__)

Validator = typing.Callable[[Record], typing.Optional[str]]

_S = typing.TypeVar("_S", bound="CookieSession")

NO_RECORD_ERROR = "You did not provide any details for authentication."


def utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def check_signing_support(jar_class: type[CookieJar], sign_cookie: typing.Any) -> None:
    """Fail when signed cookies are requested from a jar that cannot sign them."""
    if is_truthy(sign_cookie) and not getattr(jar_class, "supports_signing", False):
        raise ImproperlyConfigured(f"Signed cookies not supported with {jar_class.__name__}!")


class RestoreOutcome(typing.NamedTuple):
    record: Record | None
    accepted: bool

    def __bool__(self) -> bool:
        return self.accepted


_REJECTED = RestoreOutcome(record=None, accepted=False)


class CookieSession:
    """
    Authentication session persisted in a credentials cookie.

    Subclasses tune the cookie with class attributes:

        class UserSession(CookieSession):
            config = CookieConfig(remember_me=True, httponly=True)
            jar_class = SignedCookieJar

    The host calls `persist` while building the session, `save_cookie` (or
    `login`) once the user is authenticated and `destroy_cookie` (or `logout`)
    on teardown.
    """

    config: typing.ClassVar[CookieConfig] = CookieConfig()
    jar_class: typing.ClassVar[type[CookieJar]] = RequestCookieJar

    def __init_subclass__(cls, **kwargs: typing.Any) -> None:
        super().__init_subclass__(**kwargs)
        check_signing_support(cls.jar_class, cls.config.sign_cookie)

    def __init__(
        self,
        jar: CookieJar,
        store: RecordStore,
        *,
        id: str | None = None,
        overrides: CookieOverrides | None = None,
        cookie_domain: str | None = None,
        validators: typing.Iterable[Validator] = (),
    ) -> None:
        self.jar = jar
        self.store = store
        self.id = id
        self.overrides = overrides or CookieOverrides()
        self.cookie_domain = cookie_domain
        self.validators = list(validators)
        self.record: Record | None = None
        self.errors: list[str] = []
        self._credentials: typing.Any = None

        # None means "not resolved yet"
        self._remember_me: typing.Any = None
        self._secure: typing.Any = None
        self._sign_cookie: typing.Any = None
        self._httponly: typing.Any = None

        check_signing_support(type(jar), self.requested_signing(self.overrides))

    @classmethod
    def configure(cls, jar_class: type[CookieJar] | None = None, **options: typing.Any) -> CookieConfig:
        """
        Change class level cookie defaults.

        Raises ImproperlyConfigured when cookie signing is enabled but the jar
        class does not support signed cookies.
        """
        config = cls.config.replace(**options)
        jar_class = jar_class or cls.jar_class
        check_signing_support(jar_class, config.sign_cookie)
        cls.jar_class = jar_class
        cls.config = config
        return config

    @classmethod
    def requested_signing(cls, overrides: CookieOverrides | None) -> typing.Any:
        """Signing flag an instance built with these overrides will use."""
        if overrides is None or overrides.sign_cookie is None:
            return cls.config.sign_cookie
        return overrides.sign_cookie

    @classmethod
    def base_cookie_key(cls) -> str:
        return cls.config.cookie_key or guess_cookie_key(cls.__name__)

    @classmethod
    async def find(cls: type[_S], jar: CookieJar, store: RecordStore, **kwargs: typing.Any) -> _S | None:
        """Build a session and restore it from the cookie. Returns None when the cookie does not authenticate."""
        session = cls(jar, store, **kwargs)
        if await session.persist():
            return session
        return None

    @property
    def cookie_key(self) -> str:
        return build_cookie_key(self.overrides.cookie_key or self.base_cookie_key(), self.id)

    @property
    def credentials(self) -> typing.Any:
        return self._credentials

    @credentials.setter
    def credentials(self, value: typing.Any) -> None:
        """Store credentials, picking up the remember me flag when it is passed along."""
        self._credentials = value
        values = list(value) if isinstance(value, (list, tuple)) else [value]
        first = values[0] if values else None
        if isinstance(first, typing.Mapping):
            if "remember_me" in first:
                self.remember_me = first["remember_me"]
        else:
            flag = next((item for item in values if isinstance(item, bool)), None)
            if flag is not None:
                self.remember_me = flag

    @property
    def remember_me(self) -> typing.Any:
        if self._remember_me is None:
            override = self.overrides.remember_me
            self._remember_me = self.config.remember_me if override is None else override
        return self._remember_me

    @remember_me.setter
    def remember_me(self, value: typing.Any) -> None:
        self._remember_me = value

    @property
    def remember_me_enabled(self) -> bool:
        return is_truthy(self.remember_me)

    @property
    def remember_me_for(self) -> datetime.timedelta | None:
        if not self.remember_me_enabled:
            return None
        override = self.overrides.remember_me_for
        return self.config.remember_me_for if override is None else override

    @property
    def remember_me_until(self) -> datetime.datetime | None:
        remember_me_for = self.remember_me_for
        if remember_me_for is None:
            return None
        return utcnow() + remember_me_for

    @property
    def secure(self) -> bool:
        if self._secure is None:
            override = self.overrides.secure
            self._secure = self.config.secure if override is None else override
        return is_truthy(self._secure)

    @secure.setter
    def secure(self, value: typing.Any) -> None:
        self._secure = value

    @property
    def sign_cookie(self) -> bool:
        if self._sign_cookie is None:
            override = self.overrides.sign_cookie
            self._sign_cookie = self.config.sign_cookie if override is None else override
        return is_truthy(self._sign_cookie)

    @sign_cookie.setter
    def sign_cookie(self, value: typing.Any) -> None:
        check_signing_support(type(self.jar), value)
        self._sign_cookie = value

    @property
    def httponly(self) -> bool:
        if self._httponly is None:
            override = self.overrides.httponly
            self._httponly = self.config.httponly if override is None else override
        return is_truthy(self._httponly)

    @httponly.setter
    def httponly(self, value: typing.Any) -> None:
        self._httponly = value

    @property
    def is_authenticated(self) -> bool:
        return self.record is not None

    def validate(self, record: Record | None) -> bool:
        self.errors = []
        if record is None:
            self.errors.append(NO_RECORD_ERROR)
            return False

        for validator in self.validators:
            error = validator(record)
            if error:
                self.errors.append(error)
        return not self.errors

    async def persist(self) -> RestoreOutcome:
        """Try to authenticate the session from the credentials cookie."""
        credentials = parse_cookie_value(self.jar.read(self.cookie_key, signed=self.sign_cookie))
        if credentials is None:
            logger.debug("Cookie %s is missing or malformed.", self.cookie_key)
            return _REJECTED

        if credentials.record_key is None:
            record = await run_async(self.store.find_by, PERSISTENCE_TOKEN, credentials.persistence_token)
        else:
            record = await run_async(self.store.find_by, self.store.primary_key, credentials.record_key)

        if record is None:
            logger.debug("Cookie %s references an unknown record.", self.cookie_key)
            self.validate(None)
            return _REJECTED

        if record.persistence_token != credentials.persistence_token:
            logger.debug("Cookie %s persistence token does not match the record.", self.cookie_key)
            self.validate(None)
            return _REJECTED

        if not self.validate(record):
            logger.debug("Record restored from cookie %s failed validation: %s", self.cookie_key, self.errors)
            return RestoreOutcome(record=None, accepted=False)

        self.record = record
        return RestoreOutcome(record=record, accepted=True)

    def cookie_attributes(self, expires: datetime.datetime | None) -> CookieAttributes:
        return CookieAttributes(
            domain=self.cookie_domain,
            expires=SESSION_ONLY if expires is None else expires,
            secure=self.secure,
            httponly=self.httponly,
            signed=self.sign_cookie,
        )

    def save_cookie(self) -> str:
        """Write the credentials cookie for the authenticated record. Returns the cookie value."""
        if self.record is None:
            raise KeepsakeError("Cannot save credentials cookie: session is not authenticated.")

        remember_me_until = self.remember_me_until
        value = encode_cookie_value(self.record.persistence_token, self.record.primary_key_value, remember_me_until)
        self.jar.write(self.cookie_key, value, self.cookie_attributes(remember_me_until))
        return value

    def destroy_cookie(self) -> None:
        self.jar.delete(self.cookie_key, domain=self.cookie_domain)

    def login(self, record: Record) -> str:
        """Mark the record as authenticated and write the credentials cookie."""
        self.record = record
        self.errors = []
        return self.save_cookie()

    def logout(self) -> None:
        self.destroy_cookie()
        self.record = None

    def __repr__(self) -> str:
        state = "authenticated" if self.is_authenticated else "anonymous"
        return f"<{type(self).__name__}: key={self.cookie_key}, state={state}>"
