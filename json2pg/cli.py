#!/usr/bin/env python3
"""
Insert a JSON array of flat records into a PostgreSQL table.

Each object in the input array becomes one INSERT. Keys that are not columns
of the target table are dropped. Numbers bound for timestamp columns are read
as Unix epoch seconds, nested objects are stored as JSON text.

Usage:
  json2pg -d mydb -t events -f events.json
  json2pg -U app -P secret -h db.local -p 5433 -d mydb -t events -f events.json -ignore-errors

Connection defaults can also come from PGUSER / PGPASSWORD / PGHOST / PGPORT /
PGDATABASE, read from the environment or a .env file.
"""

from __future__ import annotations

from typing import Optional, Sequence

from json2pg.config import Config, load_env, parse_config
from json2pg.console import fail, log_info
from json2pg.db import TargetDb, table_columns
from json2pg.errors import Json2PgError, SchemaLookupError
from json2pg.loader import LoadResult, load_records, read_records


def run(config: Config) -> LoadResult:
    with TargetDb(config) as db:
        records = read_records(config.file)
        log_info(f"Read {len(records)} records from {config.file}")
        try:
            columns = table_columns(db.conn, config.database, config.table)
        except SchemaLookupError as e:
            raise SchemaLookupError(f"Failed to read table structure: {e}") from e
        result = load_records(db.conn, config, records, columns)
        log_info(f"Processed {result.rows_processed} records")
        return result


def print_summary(result: LoadResult, table: str) -> None:
    print(f"Inserted {result.total_inserted} rows into {table}")
    if result.errors:
        print(f"Errors occurred during execution ({len(result.errors)}):")
        for i, err in enumerate(result.errors):
            print(f"#{i}\n{err}\n")


def main(argv: Optional[Sequence[str]] = None) -> None:
    load_env()
    config = parse_config(argv)

    try:
        result = run(config)
    except Json2PgError as e:
        fail(str(e))

    print_summary(result, config.table)
    if result.errors:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
