"""Identifier resolution over ordered ``datetime``-keyed record sequences.

The same rule serves both addressing depths: a day inside ``days`` and an
hour inside one day's ``hours``. A string identifier matches the first record
whose ``datetime`` equals it; a number is a zero-based position. Anything
else is a programming error and raises ``InvalidIdentifierTypeError``.
A miss is never an error: lookups return ``None`` and writes do nothing.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableSequence, Sequence
from dataclasses import dataclass
from typing import Any

from .exceptions import InvalidIdentifierTypeError, InvalidParameterTypeError

Record = dict[str, Any]


@dataclass(frozen=True)
class ByKey:
    """Select the first record whose ``datetime`` equals ``key``."""

    key: str


@dataclass(frozen=True)
class ByIndex:
    """Select the record at zero-based position ``index``.

    ``index`` is ``None`` for a number that can never be a position
    (e.g. ``1.5``); such an identifier is valid but never matches.
    """

    index: int | None


Identifier = ByKey | ByIndex


def to_identifier(value: Any) -> Identifier:
    """Map a caller-supplied day/time value onto the identifier union."""
    if isinstance(value, (ByKey, ByIndex)):
        return value
    if isinstance(value, str):
        return ByKey(value)
    # bool is an int subclass but never a meaningful position.
    if isinstance(value, int) and not isinstance(value, bool):
        return ByIndex(value)
    if isinstance(value, float):
        return ByIndex(int(value) if value.is_integer() else None)
    raise InvalidIdentifierTypeError(
        f"Invalid datetime identifier {value!r}; expected a string or a number.",
        value=value,
    )


def locate(sequence: Sequence[Any], identifier: Any) -> int | None:
    """Return the position that ``identifier`` resolves to, or ``None``."""
    ident = to_identifier(identifier)
    if isinstance(ident, ByKey):
        for position, item in enumerate(sequence):
            if isinstance(item, Mapping) and item.get("datetime") == ident.key:
                return position
        return None
    if ident.index is None or not 0 <= ident.index < len(sequence):
        return None
    if not isinstance(sequence[ident.index], Mapping):
        return None
    return ident.index


def resolve_item(sequence: Sequence[Any] | None, identifier: Any) -> Record | None:
    """Return the record ``identifier`` selects, or ``None`` when absent.

    The record is returned by reference; callers that hand it outside the
    store must copy it.
    """
    position = locate(sequence or (), identifier)
    if position is None:
        return None
    return sequence[position]  # type: ignore[index]


def _require_mapping(record: Any, operation: str) -> None:
    if not isinstance(record, Mapping):
        raise InvalidParameterTypeError(
            f"{operation}: record must be a mapping, got {type(record).__name__}."
        )


def replace_item(
    sequence: MutableSequence[Any] | None, identifier: Any, record: Mapping[str, Any]
) -> bool:
    """Replace the selected record with a copy of ``record``.

    The stored ``datetime`` always stays the original one, whatever
    ``record`` says. Returns ``False`` (and changes nothing) on a miss.
    """
    _require_mapping(record, "replace_item")
    position = locate(sequence or (), identifier)
    if position is None:
        return False
    original_key = sequence[position].get("datetime")  # type: ignore[index]
    replacement = dict(record)
    replacement["datetime"] = original_key
    sequence[position] = replacement  # type: ignore[index]
    return True


def merge_item(
    sequence: MutableSequence[Any] | None, identifier: Any, partial: Mapping[str, Any]
) -> bool:
    """Shallow-merge ``partial`` into the selected record, keeping its ``datetime``."""
    _require_mapping(partial, "merge_item")
    target = resolve_item(sequence, identifier)
    if target is None:
        return False
    update_record(target, partial, exclude_keys=("datetime",))
    return True


def update_record(
    original: Record, updates: Mapping[str, Any], exclude_keys: Iterable[str] = ()
) -> None:
    """Copy ``updates`` into ``original`` in place, skipping ``exclude_keys``."""
    excluded = set(exclude_keys)
    for key, value in updates.items():
        if key not in excluded:
            original[key] = value


def extract_subobject(original: Mapping[str, Any], keys: Iterable[str]) -> Record:
    """Project ``original`` onto the listed keys that are actually present."""
    return {key: original[key] for key in keys if key in original}
