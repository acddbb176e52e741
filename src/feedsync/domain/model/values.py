"""Value shapes shared by extraction, resolution and validation."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence

type FeedValue = str | int | float | bool | list[str]
type ResolvedValueSet = dict[str, FeedValue]
type SourceRecord = Mapping[str, object]


def is_empty(value: object) -> bool:
    """Return whether ``value`` counts as "no value".

    ``None``, blank strings and empty collections are empty. Zero and ``False``
    are real values (an inventory count of 0 is meaningful).
    """

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Mapping | Sequence):
        return len(value) == 0  # pyright: ignore[reportUnknownArgumentType]
    return False


_LEADING_NUMBER = re.compile(r"^\s*[-+]?(?:\d+(?:\.\d*)?|\.\d+)")


def parse_number(value: object) -> float | None:
    """Read a number the lenient way upstream stores do.

    Numeric strings may carry a trailing unit (``"1.5 kg"`` reads as ``1.5``).
    Booleans and anything without a leading number give ``None``.
    """

    if isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        return float(value)
    if isinstance(value, str):
        match = _LEADING_NUMBER.match(value)
        if match is not None:
            return float(match.group(0))
    return None
