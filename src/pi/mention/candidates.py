"""Candidate index: normalization of the host-supplied candidate collection.

Hosts hand over plain strings or records (mappings or objects with
attributes). Strings are promoted to ``{label_key: value}`` records, records
without a truthy label are dropped, and the remainder is sorted by label
with accent- and case-insensitive collation (ties broken by
accents, then case).
"""

from __future__ import annotations

import logging
import unicodedata
from collections.abc import Iterable, Mapping
from typing import Any, Callable

logger = logging.getLogger(__name__)

Candidate = Any
FieldGetter = Callable[[Candidate, str], Any]


def get_field(candidate: Candidate, name: str) -> Any:
    """Look up *name* on a mapping or an attribute-bearing record."""
    if isinstance(candidate, Mapping):
        return candidate.get(name)
    return getattr(candidate, name, None)


def field_text(candidate: Candidate, name: str, getter: FieldGetter = get_field) -> str | None:
    """Return the string form of a field, or ``None`` when it is absent."""
    value = getter(candidate, name)
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def label_sort_key(label: str) -> tuple[str, str, str]:
    """Collation key for a label.

    Letters compare first without accents or case, then accents break ties,
    then case with lower case first: ``alice < Alice < Bob < \u00c9mile < zed``.
    """
    decomposed = unicodedata.normalize("NFKD", label)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), decomposed.casefold(), label.swapcase())


def normalize_candidates(
    items: Iterable[Candidate] | None,
    label_key: str,
    getter: FieldGetter = get_field,
) -> list[Candidate]:
    """Promote strings, drop unlabeled records and sort by label."""
    if not items:
        return []

    records: list[Candidate] = []
    dropped = 0
    for item in items:
        if isinstance(item, str):
            item = {label_key: item}
        if not getter(item, label_key):
            dropped += 1
            continue
        records.append(item)

    if dropped:
        logger.debug("Dropped %d candidate(s) without a %r label", dropped, label_key)

    records.sort(key=lambda c: label_sort_key(field_text(c, label_key, getter) or ""))
    return records


class CandidateIndex:
    """The normalized, filterable candidate set.

    Replaced wholesale through :meth:`replace`; never mutated in place.
    """

    def __init__(
        self,
        items: Iterable[Candidate] | None = None,
        label_key: str = "label",
        getter: FieldGetter = get_field,
    ) -> None:
        self._label_key = label_key
        self._getter = getter
        self._raw: list[Candidate] = list(items or [])
        self._items: list[Candidate] = normalize_candidates(self._raw, label_key, getter)

    @property
    def items(self) -> list[Candidate]:
        return list(self._items)

    @property
    def label_key(self) -> str:
        return self._label_key

    @property
    def getter(self) -> FieldGetter:
        return self._getter

    def replace(self, items: Iterable[Candidate] | None) -> None:
        self._raw = list(items or [])
        self._items = normalize_candidates(self._raw, self._label_key, self._getter)

    def relabel(self, label_key: str) -> None:
        """Re-run normalization of the last supplied collection under *label_key*."""
        self._label_key = label_key
        self._items = normalize_candidates(self._raw, label_key, self._getter)

    def label_of(self, candidate: Candidate) -> str:
        return field_text(candidate, self._label_key, self._getter) or ""

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(self._items)
