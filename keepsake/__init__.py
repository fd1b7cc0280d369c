from keepsake.authentication import RememberMeBackend, forget, get_cookie_session, remember
from keepsake.config import CookieConfig, CookieOverrides, load_cookie_config
from keepsake.cookies import SESSION_ONLY, CookieAttributes, CookieCredentials, encode_cookie_value, parse_cookie_value
from keepsake.exceptions import ImproperlyConfigured, KeepsakeError
from keepsake.jars import RequestCookieJar, SignedCookieJar
from keepsake.sessions import CookieSession, RestoreOutcome
from keepsake.stores import InMemoryStore

__all__ = [
    "CookieSession",
    "RestoreOutcome",
    "CookieConfig",
    "CookieOverrides",
    "load_cookie_config",
    "CookieAttributes",
    "CookieCredentials",
    "SESSION_ONLY",
    "encode_cookie_value",
    "parse_cookie_value",
    "RequestCookieJar",
    "SignedCookieJar",
    "InMemoryStore",
    "RememberMeBackend",
    "remember",
    "forget",
    "get_cookie_session",
    "KeepsakeError",
    "ImproperlyConfigured",
]

__version__ = "0.1.0"
