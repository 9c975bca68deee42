from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence

import psycopg2

from json2pg.config import Config
from json2pg.console import log_info, log_warn
from json2pg.errors import FieldConversionError, InputFileError, RowInsertError
from json2pg.values import convert_value

PROGRESS_EVERY = 25


@dataclass
class InsertStatement:
    columns: List[str]
    query: str
    params: List[Any]


@dataclass
class LoadResult:
    total_inserted: int = 0
    rows_processed: int = 0
    errors: List[RowInsertError] = field(default_factory=list)


def quote_ident(ident: str) -> str:
    # `%` is doubled because the statement goes through psycopg2's
    # parameter formatting.
    return '"' + ident.replace('"', '""').replace("%", "%%") + '"'


def _reject_constant(name: str) -> None:
    raise ValueError(f"invalid JSON literal {name}")


def read_records(path: str) -> List[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            payload = json.load(f, parse_constant=_reject_constant)
    except OSError as e:
        raise InputFileError(f"Failed to open input file for reading: {e}") from e
    except (ValueError, RecursionError) as e:
        raise InputFileError(f"Failed to decode input data: {e}") from e

    if not isinstance(payload, list):
        raise InputFileError("Failed to decode input data: top-level value must be an array of objects")
    for i, item in enumerate(payload):
        if not isinstance(item, dict):
            raise InputFileError(f"Failed to decode input data: element #{i} is not an object")
    if not payload:
        raise InputFileError("No rows in the input file")
    return payload


def build_insert(table: str, record: Mapping[str, Any], columns: Mapping[str, str]) -> InsertStatement:
    kept: List[str] = []
    fields: List[str] = []
    params: List[Any] = []
    for key, value in record.items():
        if key not in columns:
            continue
        kept.append(key)
        fields.append(quote_ident(key))
        params.append(convert_value(key, value, columns[key]))

    placeholders = ",".join(["%s"] * len(kept))
    query = f"INSERT INTO {quote_ident(table)} ({','.join(fields)}) VALUES ({placeholders})"
    return InsertStatement(columns=kept, query=query, params=params)


def insert_row(conn, stmt: InsertStatement, row_index: int) -> int:
    # Params are adapted client-side, so a bad value (e.g. NUL in a string)
    # raises ValueError or TypeError instead of psycopg2.Error.
    try:
        with conn.cursor() as cur:
            cur.execute(stmt.query, stmt.params)
            return max(cur.rowcount, 0)
    except (psycopg2.Error, ValueError, TypeError) as e:
        raise RowInsertError(row_index, e, stmt.query, stmt.params) from e


def _insert_record(conn, table: str, record: Mapping[str, Any], columns: Mapping[str, str], row_index: int) -> int:
    try:
        stmt = build_insert(table, record, columns)
    except FieldConversionError as e:
        raise RowInsertError(row_index, e) from e
    if not stmt.columns:
        raise RowInsertError(row_index, f"no columns of {table} in record")
    return insert_row(conn, stmt, row_index)


def load_records(
    conn,
    config: Config,
    records: Sequence[Mapping[str, Any]],
    columns: Mapping[str, str],
) -> LoadResult:
    """Insert every record, one statement per row.

    Without `config.ignore_errors` the first failing row raises
    `RowInsertError`. With it, failures are collected on the result and the
    remaining rows are still attempted.
    """
    result = LoadResult()
    total_rows = len(records)
    for idx, record in enumerate(records):
        if idx == 0 or (idx + 1) % PROGRESS_EVERY == 0 or idx + 1 == total_rows:
            log_info(f"Progress: {idx + 1}/{total_rows}")
        result.rows_processed += 1
        try:
            result.total_inserted += _insert_record(conn, config.table, record, columns, idx)
        except RowInsertError as e:
            if not config.ignore_errors:
                raise
            log_warn(f"row #{idx} skipped: {e.cause}")
            result.errors.append(e)
    return result
