from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like
from .model import Language
from .repository import LanguageRepository


def _to_language(r: dict) -> Language:
    return Language(language_id=int(r["ID"]), language=r["Language"], short_name=r.get("ShortName"))


class MySQLLanguageRepository(LanguageRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, language_id: int) -> Optional[Language]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT ID, Language, ShortName FROM Languages WHERE ID=%s", (int(language_id),))
            r = fetchone(cur)
            return _to_language(r) if r else None

    def search(
        self,
        *,
        language_id: Optional[int] = None,
        language: Optional[str] = None,
        short_name: Optional[str] = None,
    ) -> Sequence[Language]:
        clauses = ["1=1"]
        params: list[object] = []
        if language_id is not None:
            clauses.append("ID=%s")
            params.append(int(language_id))
        if language:
            clauses.append("Language LIKE %s")
            params.append(like(language))
        if short_name:
            clauses.append("ShortName LIKE %s")
            params.append(like(short_name))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT ID, Language, ShortName
                FROM Languages
                WHERE {where}
                ORDER BY Language ASC
                """,
                tuple(params),
            )
            return [_to_language(r) for r in fetchall(cur)]

    def create(self, *, language: str, short_name: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO Languages(Language, ShortName) VALUES(%s,%s)", (language, short_name))
            return int(cur.lastrowid)

    def update(self, *, language_id: int, language: str, short_name: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE Languages SET Language=%s, ShortName=%s WHERE ID=%s",
                (language, short_name, int(language_id)),
            )
            return cur.rowcount > 0

    def delete(self, language_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM Languages WHERE ID=%s", (int(language_id),))
            return cur.rowcount > 0
