"""Reading the integer records used by the car, road, cross and answer files."""

from __future__ import annotations

import re
from collections.abc import Iterator
from os import PathLike

# A run of decimal digits counts only when a non-digit character closes it;
# a minus sign directly in front of the digits makes the value negative.
_NUMBER = re.compile(r"(-)?([0-9]+)(?=[^0-9])")


def parse_ints(text: str) -> list[int]:
    """Return the integers found in ``text``, in order.

    A number is taken only when some non-digit character follows it, so a
    record such as ``(1,2,3)`` yields ``[1, 2, 3]`` while digits left
    dangling at the very end of the text are ignored.
    """
    return [
        -int(digits) if sign else int(digits)
        for sign, digits in _NUMBER.findall(text)
    ]


def read_records(path: str | PathLike[str]) -> Iterator[list[int]]:
    """Yield the parsed integers of every record line in the file at ``path``.

    Empty lines and lines starting with ``#`` are skipped. A file that cannot
    be opened yields no records.
    """
    try:
        handle = open(path, encoding="utf-8")
    except OSError:
        return
    with handle:
        for raw in handle:
            line = raw.rstrip("\r\n")
            if line and not line.startswith("#"):
                yield parse_ints(line)