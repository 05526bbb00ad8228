"""
SQL statement builders.

Table and column names are interpolated into statements, so every name is
checked against a plain-identifier pattern first. Values and predicate
arguments are always bound as ``?`` parameters.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Sequence

from tagstore.core.errors import InvalidColumn
from tagstore.core.models import Predicate

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

Statement = tuple[str, tuple[Any, ...]]


def check_identifier(name: str) -> str:
    """Return the name unchanged if it is a plain SQL identifier."""
    if not isinstance(name, str) or _IDENTIFIER.fullmatch(name) is None:
        raise InvalidColumn(str(name), "not a plain identifier")
    return name


def _where_clause(predicate: Predicate) -> str:
    return f" WHERE {predicate.where}" if predicate.where else ""


# =============================================================================
# Reads
# =============================================================================


def project_columns(
    projection_map: Mapping[str, str],
    fields: Sequence[str] | None,
) -> list[str]:
    """Translate caller fields to select expressions.

    Each field is looked up in the projection map; a mapped column whose
    name differs from the field is aliased back to the field name. No fields
    means every mapped field.

    Raises:
        InvalidColumn: a field is not in the projection map
    """
    if not fields:
        fields = list(projection_map)

    columns = []
    for name in fields:
        column = projection_map.get(name)
        if column is None:
            raise InvalidColumn(name)
        columns.append(column if column == name else f"{column} AS {name}")
    return columns


def build_select(
    table: str,
    columns: Sequence[str],
    predicate: Predicate,
    sort_order: str | None = None,
) -> Statement:
    sql = f"SELECT {', '.join(columns)} FROM {check_identifier(table)}"
    sql += _where_clause(predicate)
    if sort_order:
        sql += f" ORDER BY {sort_order}"
    return sql, predicate.args


# =============================================================================
# Writes
# =============================================================================


def build_insert(
    table: str,
    values: Mapping[str, Any],
    null_column: str | None = None,
) -> Statement:
    """Single-row INSERT; empty values insert a row of defaults."""
    table = check_identifier(table)
    if not values:
        if null_column:
            return f"INSERT INTO {table} ({check_identifier(null_column)}) VALUES (NULL)", ()
        return f"INSERT INTO {table} DEFAULT VALUES", ()

    names = [check_identifier(name) for name in values]
    placeholders = ", ".join("?" for _ in names)
    sql = f"INSERT INTO {table} ({', '.join(names)}) VALUES ({placeholders})"
    return sql, tuple(values.values())


def build_update(
    table: str,
    values: Mapping[str, Any],
    predicate: Predicate,
) -> Statement:
    if not values:
        raise ValueError("Empty values")

    assignments = ", ".join(f"{check_identifier(name)}=?" for name in values)
    sql = f"UPDATE {check_identifier(table)} SET {assignments}" + _where_clause(predicate)
    return sql, tuple(values.values()) + predicate.args


def build_delete(table: str, predicate: Predicate) -> Statement:
    sql = f"DELETE FROM {check_identifier(table)}" + _where_clause(predicate)
    return sql, predicate.args
