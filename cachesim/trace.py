"""
Reader for valgrind ``--trace-mem`` style traces.

Each data line looks like ``" L 7ff000398,8"``: an operation letter, a hex
address without prefix and a decimal access size. Records are produced lazily
so arbitrarily long traces never have to fit in memory.
"""

import re
from typing import Iterator, Optional

from cachesim.entity.model import AccessRecord, Operation, TraceFormatError

import logging
logger = logging.getLogger(__name__)

_LINE_RE = re.compile(r"^\s*([ILSM])\s+([0-9a-fA-F]+),(\d+)\s*$")


def parse_line(line: str, lineno: Optional[int] = None) -> Optional[AccessRecord]:
    if not line.strip():
        return None
    match = _LINE_RE.match(line)
    if not match:
        where = f"line {lineno}" if lineno is not None else "line"
        raise TraceFormatError(f"malformed trace {where}: {line.rstrip()!r}")
    op, addr, size = match.groups()
    return AccessRecord(Operation(op), int(addr, 16), int(size))


def iter_records(lines) -> Iterator[AccessRecord]:
    for lineno, line in enumerate(lines, start=1):
        record = parse_line(line, lineno)
        if record is not None:
            yield record


def read_trace(path: str) -> Iterator[AccessRecord]:
    logger.debug("reading trace %s", path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            yield from iter_records(f)
        except UnicodeDecodeError as e:
            raise TraceFormatError(
                f"not a text trace: {e.reason}") from e


__all__ = ["iter_records", "parse_line", "read_trace"]
