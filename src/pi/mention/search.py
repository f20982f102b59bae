"""Candidate filtering.

Exact, case-insensitive substring matching over one or more filter fields.
Order is preserved from the input, so an index that is already sorted by
label stays sorted.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TypeVar

from pi.mention.candidates import FieldGetter, field_text, get_field

T = TypeVar("T")


def matches(
    candidate: object,
    needle: str,
    filter_keys: Sequence[str],
    getter: FieldGetter = get_field,
    *,
    case_insensitive: bool = True,
) -> bool:
    """Check whether any filter field of *candidate* contains *needle*.

    A field missing on the candidate contributes no match.
    """
    if case_insensitive:
        needle = needle.lower()
    for key in filter_keys:
        text = field_text(candidate, key, getter)
        if text is None:
            continue
        if case_insensitive:
            text = text.lower()
        if needle in text:
            return True
    return False


def filter_candidates(
    search_string: str | None,
    candidates: Sequence[T],
    filter_keys: Sequence[str],
    getter: FieldGetter = get_field,
    *,
    disable_search: bool = False,
    max_items: int = -1,
    case_insensitive: bool = True,
) -> list[T]:
    """Return the visible subsequence of *candidates* for *search_string*.

    With ``disable_search`` the candidates are assumed to be filtered
    upstream and are passed through. A ``None`` or empty search string
    matches everything. ``max_items <= 0`` means unbounded.
    """
    if disable_search or not search_string:
        result = list(candidates)
    else:
        result = [
            c
            for c in candidates
            if matches(
                c,
                search_string,
                filter_keys,
                getter,
                case_insensitive=case_insensitive,
            )
        ]

    if max_items > 0:
        result = result[:max_items]
    return result
