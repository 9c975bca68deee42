from __future__ import annotations

from typing import Any, Sequence


class Json2PgError(Exception):
    pass


class DbConnectError(Json2PgError):
    pass


class InputFileError(Json2PgError):
    pass


class SchemaLookupError(Json2PgError):
    pass


class FieldConversionError(Json2PgError):
    def __init__(self, field: str, cause: BaseException):
        super().__init__(f"Failed to encode field {field}: {cause}")
        self.field = field
        self.cause = cause


class RowInsertError(Json2PgError):
    """A single record could not be inserted.

    Carries enough context to reproduce the failure by hand: the row index in
    the input array, the underlying cause, and the statement with its params.
    """

    def __init__(
        self,
        row_index: int,
        cause: Any,
        query: str = "",
        params: Sequence[Any] = (),
    ):
        self.row_index = row_index
        self.cause = cause
        self.query = query
        self.params = list(params)
        super().__init__(self._render())

    def _render(self) -> str:
        msg = f"Failed to insert row #{self.row_index}: {self.cause}"
        if self.query:
            msg += f"\n\nquery: {self.query}\n\nvals: {self.params!r}"
        return msg
