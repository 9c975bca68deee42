from __future__ import annotations

from typing import Dict

import psycopg2

from json2pg.config import Config
from json2pg.errors import DbConnectError, SchemaLookupError


class TargetDb:
    """Connection to the destination database, closed on every exit path."""

    def __init__(self, config: Config):
        self._config = config
        self.conn = None

    def __enter__(self):
        try:
            self.conn = psycopg2.connect(
                host=self._config.host,
                port=self._config.port,
                user=self._config.user,
                password=self._config.password,
                dbname=self._config.database,
            )
        except psycopg2.Error as e:
            raise DbConnectError(f"Failed to connect to db: {e}") from e
        # One statement per row; a failed row must not abort the ones after it.
        self.conn.autocommit = True
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.conn is not None:
            self.conn.close()
            self.conn = None


def table_columns(conn, database: str, table: str) -> Dict[str, str]:
    try:
        with conn.cursor() as cur:
            cur.execute(
                """
                SELECT column_name, data_type
                FROM information_schema.columns
                WHERE table_name = %s AND table_catalog = %s
                """,
                (table, database),
            )
            rows = cur.fetchall()
    except psycopg2.Error as e:
        raise SchemaLookupError(f"query failed: {e}") from e

    cols: Dict[str, str] = {}
    for name, data_type in rows:
        cols[str(name)] = str(data_type)
    if not cols:
        raise SchemaLookupError(f"table {table!r} not found in database {database!r}")
    return cols
