"""Load a JSON array of flat records into a PostgreSQL table."""

__version__ = "0.1.0"
