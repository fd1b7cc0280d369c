from __future__ import annotations

import typing

from keepsake.contracts import Record

PERSISTENCE_TOKEN = "persistence_token"


class InMemoryStore:
    def __init__(self, records: typing.Iterable[Record], primary_key: str = "id") -> None:
        self.records = list(records)
        self.primary_key = primary_key

    @property
    def by_id(self) -> dict[str, Record]:
        return {r.primary_key_value: r for r in self.records}

    @property
    def by_token(self) -> dict[str, Record]:
        return {r.persistence_token: r for r in self.records}

    async def find_by(self, field_name: str, value: str) -> typing.Optional[Record]:
        if field_name == PERSISTENCE_TOKEN:
            return self.by_token.get(value)
        if field_name == self.primary_key:
            return self.by_id.get(value)
        raise LookupError(f"Cannot look up records by {field_name!r}.")
