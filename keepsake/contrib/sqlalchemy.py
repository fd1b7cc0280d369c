from __future__ import annotations

import sqlalchemy as sa
import typing
from sqlalchemy.ext.asyncio import AsyncSession

from keepsake.contracts import Record


class SQLAlchemyStore:
    """
    Record store backed by an SQLAlchemy model.

    The model must expose `persistence_token` and `primary_key_value`.
    Integer primary keys are cast from the string form used in cookies.
    """

    def __init__(self, session: AsyncSession, model_class: type, primary_key: str = "id") -> None:
        self.session = session
        self.model_class = model_class
        self.primary_key = primary_key

    def _coerce(self, column: typing.Any, value: str) -> typing.Any:
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            return value
        if python_type is int:
            try:
                return int(value)
            except ValueError:
                return None
        return value

    async def find_by(self, field_name: str, value: str) -> Record | None:
        column = getattr(self.model_class, field_name)
        coerced = self._coerce(column, value)
        if coerced is None:
            return None

        stmt: sa.Executable = sa.select(self.model_class).where(column == coerced)
        result = await self.session.scalars(stmt)
        return result.one_or_none()
