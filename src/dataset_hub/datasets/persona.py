from __future__ import annotations

import re
from typing import NamedTuple

# first bracketed segment on a single line, e.g. "[Age: 29, Income: ₹15 LPA]"
_BRACKETS = re.compile(r"\[(.*?)\]")


class PersonaPair(NamedTuple):
    key: str
    value: str


def parse_persona(text: str | None) -> list[PersonaPair]:
    """Best-effort key/value pairs from the first `[...]` in a dataset input.

    Display only. Returns an empty list when there is no bracketed segment,
    in which case the caller shows the raw text.
    """
    if not text:
        return []
    match = _BRACKETS.search(text)
    if not match:
        return []

    pairs: list[PersonaPair] = []
    for fragment in match.group(1).split(","):
        key, _, value = fragment.partition(":")
        key, value = key.strip(), value.strip()
        if key and value:
            pairs.append(PersonaPair(key, value))
    return pairs
