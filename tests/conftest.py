import dataclasses

import pytest
import typing
from starlette.requests import HTTPConnection

from keepsake.jars import RequestCookieJar
from keepsake.sessions import CookieSession
from keepsake.stores import InMemoryStore


@dataclasses.dataclass
class User:
    id: int
    persistence_token: str
    is_active: bool = True

    @property
    def primary_key_value(self) -> str:
        return str(self.id)

    @property
    def is_authenticated(self) -> bool:
        return True

    @property
    def display_name(self) -> str:
        return f"user{self.id}"


class UserSession(CookieSession):
    ...


class ConnectionFactory(typing.Protocol):  # pragma: nocover
    def __call__(self, cookies: dict[str, str] | None = None) -> HTTPConnection:
        ...


def make_connection(cookies: dict[str, str] | None = None) -> HTTPConnection:
    headers = []
    if cookies:
        header = "; ".join(f"{name}={value}" for name, value in cookies.items())
        headers.append((b"cookie", header.encode()))
    return HTTPConnection({"type": "http", "headers": headers})


@pytest.fixture
def connection_factory() -> ConnectionFactory:
    return make_connection


@pytest.fixture
def user() -> User:
    return User(id=1, persistence_token="token1")


@pytest.fixture
def other_user() -> User:
    return User(id=2, persistence_token="token2")


@pytest.fixture
def store(user: User, other_user: User) -> InMemoryStore:
    return InMemoryStore([user, other_user])


@pytest.fixture
def jar() -> RequestCookieJar:
    return RequestCookieJar(make_connection())
