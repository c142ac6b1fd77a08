"""
Contadores con nombre, incrementados de forma atómica en la base de datos.
"""
from __future__ import annotations

from typing import Protocol

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from foyer.models import Counter

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SequenceCounter(Protocol):
    async def next_value(self, name: str) -> int:
        ...


class SqlSequenceCounter:
    """
    INSERT ... ON CONFLICT DO UPDATE ... RETURNING en una sola sentencia:
    dos peticiones concurrentes nunca obtienen el mismo valor.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def next_value(self, name: str) -> int:
        dialect = self.db.get_bind().dialect.name
        insert = _INSERTS.get(dialect)
        if insert is None:
            raise RuntimeError(f"Dialecto no soportado para contadores: {dialect}")

        stmt = (
            insert(Counter)
            .values(name=name, value=1)
            .on_conflict_do_update(
                index_elements=[Counter.name],
                set_={"value": Counter.value + 1},
            )
            .returning(Counter.value)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one()
