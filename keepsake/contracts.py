from __future__ import annotations

import typing

from keepsake.cookies import CookieAttributes


@typing.runtime_checkable
class Record(typing.Protocol):  # pragma: nocover
    """A stored identity that can be restored from a credentials cookie."""

    @property
    def persistence_token(self) -> str:
        ...

    @property
    def primary_key_value(self) -> str:
        ...


class RecordStore(typing.Protocol):  # pragma: nocover
    """Look up a single record by a field name.

    `field_name` is either "persistence_token" or the value of `primary_key`.
    Implementations may be sync or async.
    """

    primary_key: str

    def find_by(self, field_name: str, value: str) -> Record | None | typing.Awaitable[Record | None]:
        ...


class CookieJar(typing.Protocol):  # pragma: nocover
    """Request-scoped cookie access provided by the HTTP layer."""

    supports_signing: typing.ClassVar[bool]

    def read(self, name: str, signed: bool = False) -> str | None:
        ...

    def write(self, name: str, value: str, attributes: CookieAttributes) -> None:
        ...

    def delete(self, name: str, domain: str | None = None) -> None:
        ...
