"""Statistics parser for the trailing "Label: Value" lines of a reply."""

import re
import warnings
from typing import Iterable

from redisgraph_lite.exceptions import DecodeWarning
from redisgraph_lite.log_config import get_logger

log = get_logger("decoder.stats")

STATS_SEPARATOR = ": "

_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")


def camel_case(label: str) -> str:
    """Normalize a human-readable label to lowerCamelCase.

    "Nodes created" -> "nodesCreated",
    "Query internal execution time" -> "queryInternalExecutionTime"
    """
    words = [w for w in _WORD_SPLIT.split(label.strip()) if w]
    if not words:
        return ""
    head, *rest = words
    return head.lower() + "".join(w[:1].upper() + w[1:].lower() for w in rest)


def parse_stats(lines: Iterable[str | bytes]) -> dict[str, str]:
    """Parse execution statistics into a {camelCaseKey: value} mapping.

    Values are kept as trimmed strings. A line without the ": " separator
    emits a DecodeWarning and is skipped.

    Args:
        lines: Stats lines from the end of a reply

    Returns:
        Fresh mapping for this reply
    """
    stats: dict[str, str] = {}
    for line in lines:
        if isinstance(line, bytes):
            line = line.decode("utf-8")
        label, sep, value = line.partition(STATS_SEPARATOR)
        if not sep:
            message = f"Skipping unparseable stats line: {line!r}"
            log.warning(message)
            warnings.warn(message, DecodeWarning, stacklevel=2)
            continue
        stats[camel_case(label)] = value.strip()
    return stats
