from __future__ import annotations

import argparse
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from dotenv import load_dotenv

from json2pg.console import fail

DEFAULT_USER = "root"
DEFAULT_HOST = "localhost"
DEFAULT_PORT = 5432


@dataclass(frozen=True)
class Config:
    user: str
    password: str
    host: str
    port: int
    database: str
    table: str
    file: str
    ignore_errors: bool = False


def load_env() -> None:
    dotenv_path = os.path.join(os.getcwd(), ".env")
    if os.path.exists(dotenv_path):
        load_dotenv(dotenv_path=dotenv_path)
    else:
        load_dotenv()


def build_parser(env: Mapping[str, str]) -> argparse.ArgumentParser:
    # -h is the host flag, so help moves to --help.
    parser = argparse.ArgumentParser(
        prog="json2pg",
        description="Insert a JSON array of records into a PostgreSQL table.",
        add_help=False,
    )
    parser.add_argument("--help", action="help", help="Show this message and exit.")
    parser.add_argument("-U", dest="user", default=env.get("PGUSER") or DEFAULT_USER, help="Postgres user")
    parser.add_argument("-P", dest="password", default=env.get("PGPASSWORD", ""), help="Postgres password")
    parser.add_argument("-h", dest="host", default=env.get("PGHOST") or DEFAULT_HOST, help="Postgres host")
    parser.add_argument("-p", dest="port", type=int, default=env.get("PGPORT") or DEFAULT_PORT, help="Postgres port")
    parser.add_argument("-d", dest="database", default=env.get("PGDATABASE", ""), help="Database name")
    parser.add_argument("-t", dest="table", default="", help="Table name")
    parser.add_argument("-f", dest="file", default="", help="Input file name")
    parser.add_argument(
        "-ignore-errors",
        "--ignore-errors",
        dest="ignore_errors",
        action="store_true",
        help="Keep going after a row fails to insert (the run still exits non-zero).",
    )
    return parser


def parse_config(argv: Optional[Sequence[str]] = None, env: Optional[Mapping[str, str]] = None) -> Config:
    if env is None:
        env = os.environ
    parser = build_parser(env)
    args = parser.parse_args(argv)

    for value, what in [
        (args.database, "database name"),
        (args.table, "table name"),
        (args.file, "input file name"),
    ]:
        if not value:
            parser.print_usage(sys.stderr)
            fail(f"Please specify {what}")

    return Config(
        user=args.user,
        password=args.password,
        host=args.host,
        port=int(args.port),
        database=args.database,
        table=args.table,
        file=args.file,
        ignore_errors=bool(args.ignore_errors),
    )
