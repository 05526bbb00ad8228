"""Predicate composition: merging WHERE clauses and their arguments."""

from __future__ import annotations

from typing import Any, Sequence

from tagstore.core.models import Predicate


def concatenate_where(a: str | None, b: str | None) -> str:
    """Concatenate two WHERE clauses, handling empty or None values."""
    if not a:
        return b or ""
    if not b:
        return a
    return f"({a}) AND ({b})"


def append_selection_args(
    original: Sequence[Any] | None,
    extra: Sequence[Any] | None,
) -> tuple[Any, ...]:
    """Append one set of selection args to another, preserving order."""
    return tuple(original or ()) + tuple(extra or ())


def merge(base: Predicate, extra: Predicate) -> Predicate:
    """Merge two predicates; ``base`` terms and arguments come first.

    An empty side leaves the other unchanged, so ``merge(empty, p) == p``
    and ``merge(p, empty) == p``.
    """
    if base.is_empty:
        return extra
    if extra.is_empty:
        return base
    return Predicate(
        where=concatenate_where(base.where, extra.where),
        args=append_selection_args(base.args, extra.args),
    )
